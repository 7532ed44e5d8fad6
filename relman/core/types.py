"""Small types and Enums used by relman."""

from enum import Enum


class Visibility(str, Enum):
    """Repository visibility options used by the repository search."""

    all = "all"
    public = "public"
    private = "private"


class Environment(str, Enum):
    """Promotion chains the deploy command can run."""

    uat = "uat"
    production = "production"
