"""Shared constants for BusiCal."""

# Sanitized event literals
SYNCED_EVENT_TITLE = "Synced Event"
BUSY_STATUS = "busy"

# Parser defaults
UNTITLED_EVENT_TITLE = "Untitled Event"

# ICS output
ICS_PRODID = "-//BusiCal//EN"
ICS_UID_DOMAIN = "busical.app"
ICS_MIME_TYPE = "text/calendar;charset=utf-8"
ICS_LINE_LIMIT = 75

# Feed validation
CALENDAR_MARKER = "BEGIN:VCALENDAR"
MAX_FEED_BYTES = 5 * 1024 * 1024

# Storage keys
ICS_URL_KEY = "busical_ics_url"
ENCRYPTION_SALT_KEY = "busical_encryption_salt"
CACHE_KEY = "busical_cache"
GOOGLE_EMAILS_KEY = "busical_google_emails"
OUTLOOK_EMAILS_KEY = "busical_outlook_emails"

# Key derivation
PBKDF2_ITERATIONS = 100_000
SALT_BYTES = 16
IV_BYTES = 12
KEY_BYTES = 32

# Staleness
STALE_AFTER_HOURS = 24
