"""Global constants for the chill application."""

# Collections
USERS = "users"
GROUPS = "groups"
HANGOUTS = "hangouts"
COLLECTIONS = (USERS, GROUPS, HANGOUTS)

# Fields on 'users'
USER_NAME = "name"
USER_HAS_SET_NAME = "hasSetName"
USER_FCM_TOKEN = "fcmToken"  # nosec B105
USER_NOTIFICATION_PREFERENCES = "notificationPreferences"
USER_GROUPS = "groups"

# Fields on 'groups'
GROUP_NAME = "name"
GROUP_CREATED_AT = "createdAt"
GROUP_ICON = "icon"
GROUP_INFO = "info"
GROUP_MEMBERS = "members"
GROUP_ADMINS = "admins"
GROUP_HANGOUTS = "hangouts"

# Fields on 'hangouts'
HANGOUT_NAME = "name"
HANGOUT_GROUP = "group"
HANGOUT_TIME = "time"
HANGOUT_POLL_IN_PROGRESS = "datetimePollInProgress"
HANGOUT_CANDIDATE_DATES = "candidateDates"
HANGOUT_POLL_SELECTIONS = "datePollSelections"
HANGOUT_ATTENDEES = "attendees"
HANGOUT_CREATED_BY = "createdBy"
HANGOUT_CREATED_ANONYMOUSLY = "createdAnonymously"
HANGOUT_CREATED_AT = "createdAt"

# Notification types and defaults
NOTIFICATION_NEW_HANGOUT = "new_hangout"
NOTIFICATION_POLL_CLOSED = "poll_closed"
DEFAULT_CLICK_ACTION = "OPEN_HANGOUT_DETAILS"
DEFAULT_CHANNEL_ID = "hangouts"
DEFAULT_GROUP_NAME = "your group"
DEFAULT_HANGOUT_NAME = "New hangout"

# firebase_admin.messaging.send_each accepts at most 500 messages per call
MESSAGING_BATCH_LIMIT = 500
