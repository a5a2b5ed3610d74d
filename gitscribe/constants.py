"""gitscribe constants and enumerations."""

from enum import Enum

# Identity environment variables recognized by git
GIT_AUTHOR_NAME = "GIT_AUTHOR_NAME"
GIT_AUTHOR_EMAIL = "GIT_AUTHOR_EMAIL"
GIT_AUTHOR_DATE = "GIT_AUTHOR_DATE"
GIT_COMMITTER_NAME = "GIT_COMMITTER_NAME"
GIT_COMMITTER_EMAIL = "GIT_COMMITTER_EMAIL"
GIT_COMMITTER_DATE = "GIT_COMMITTER_DATE"

# yyyy-MM-ddTHH:mm:ssZ, always UTC
GIT_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

FIELD_SEPARATOR = "|"

# %D|%h|%s|%an|%ae|%aI|%cn|%ce|%cI
COMMIT_SUMMARY_FORMAT = FIELD_SEPARATOR.join(
    ["%D", "%h", "%s", "%an", "%ae", "%aI", "%cn", "%ce", "%cI"]
)
COMMIT_SUMMARY_FIELDS = 9

# %(refname:short)|%(objectname)|%(upstream:short)
BRANCH_REF_FORMAT = FIELD_SEPARATOR.join(
    ["%(refname:short)", "%(objectname)", "%(upstream:short)"]
)
BRANCH_REF_FIELDS = 3

DETACHED_HEAD = "detached HEAD"

# git translates its porcelain messages; parsed output must stay untranslated
GIT_LOCALE_ENV = {"LC_ALL": "C", "LANGUAGE": "C"}

DEFAULT_CONFIG_PATH = ".gitscribe/config.yaml"
DEFAULT_TIMEOUT_SECONDS = 60


class ParentMode(Enum):
    """Parent-following mode for history traversal."""

    ALL = "all"
    FIRST = "first"


class NoteMode(Enum):
    """How a note is attached when one may already exist."""

    ADD = "add"
    APPEND = "append"
    FORCE = "force"
