import re

# Regex Constants
# "![Photo|800x600](https://host/path/abc.jpg)"; upstream occasionally doubles the closing paren.
# The target may hold balanced parens ("a_(1).jpg") but no whitespace.
RE_PHOTO_TOKEN = re.compile(
    r"!\[(?P<alt>Photo)(?:\|(?P<dims>[^\]]*))?\]"
    r"\((?P<target>[^()\s]*(?:\([^()\s]*\)[^()\s]*)*)\)+"
)
RE_DIMENSIONS = re.compile(r"^\s*(\d+)\s*x\s*(\d+)\s*$", re.IGNORECASE)
RE_HTTP_URL = re.compile(r"^https?://(?:www\.)?[-a-zA-Z0-9@:%._+~#=]{1,256}\.[a-zA-Z0-9()]{1,6}\b[-a-zA-Z0-9()@:%_+.~#?&/=]*$")
RE_IMAGE_FILENAME = re.compile(r"([^/]+)\.(?:jpe?g|png)$", re.IGNORECASE)

# Spreadsheet tabs
SHEET_LOCATIONS = "Locations"
SHEET_BLOG_POSTS = "Blog Posts"
SHEET_SUBSCRIBERS = "SMS Subscribers"

LOCATION_HEADERS = ["time", "latitude", "longitude", "course", "bsp", "twa", "twd", "tws", "gust", "isSample"]
BLOG_POST_HEADERS = ["topic_id", "title", "raw", "cooked", "created_at"]

# Content store document types
DOC_POST = "post"
DOC_PHOTO = "photo"

# Limits
SMS_MAX_LEN = 1600

# Timeouts
FEED_TIMEOUT_S = 25
SANITY_TIMEOUT_S = 25
TWILIO_TIMEOUT_S = 25

# Politeness
CONTENT_WRITE_DELAY_S = 0.1
