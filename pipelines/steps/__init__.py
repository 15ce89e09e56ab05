# Namespace for pipeline steps
from .fetch_page import FetchPage  # noqa: F401
from .truncate_text import TruncateText  # noqa: F401
from .extract_people import ExtractPeople  # noqa: F401
from .validate_people import ValidatePeople  # noqa: F401
