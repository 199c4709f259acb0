# core/constants.py

# --- User roles ---
ROLE_VOLUNTEER = "volunteer"
ROLE_ORGANIZER = "organizer"
ROLE_ADMIN = "admin"

# --- Lifecycle messages ---

# Stored as feedback on every sibling application rejected when a project fills up
AUTO_REJECTION_FEEDBACK = "Another volunteer has been selected for this project."

# --- Listing ---
SORT_DESC = "desc"
SORT_ASC = "asc"

# Window used by the "ending soon" project listing
ENDING_SOON_DEFAULT_DAYS = 7
