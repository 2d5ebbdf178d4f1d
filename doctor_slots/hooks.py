app_name = "doctor_slots"
app_title = "Doctor Slots"
app_publisher = "Doctor Slots contributors"
app_description = "Physician slot scheduling and booking rule engine"
app_email = "maintainers@doctor-slots.dev"
app_license = "mit"

# Apps
# ------------------

# required_apps = []

# Includes in <head>
# ------------------

# include js, css files in header of desk.html
# app_include_css = "/assets/doctor_slots/css/doctor_slots.css"
# app_include_js = "/assets/doctor_slots/js/doctor_slots.js"

# Installation
# ------------

# before_install = "doctor_slots.install.before_install"
# after_install = "doctor_slots.install.after_install"

# Document Events
# ---------------
# Hook on document methods and events

# doc_events = {
# 	"*": {
# 		"on_update": "method",
# 		"on_cancel": "method",
# 		"on_trash": "method"
# 	}
# }

# Scheduled Tasks
# ---------------
# PENDING slots have no automatic expiry.

# scheduler_events = {}

# Testing
# -------

# before_tests = "doctor_slots.install.before_tests"

# Ignore links to specified DocTypes when deleting documents
# -----------------------------------------------------------

# ignore_links_on_delete = ["Doctor Slot Audit Log"]

# Request Events
# ----------------
# before_request = ["doctor_slots.utils.before_request"]
# after_request = ["doctor_slots.utils.after_request"]

# Automatically update python controller files with type annotations for this app.
# export_python_type_annotations = True

# default_log_clearing_doctypes = {
# 	"Logging DocType Name": 30  # days to retain logs
# }
