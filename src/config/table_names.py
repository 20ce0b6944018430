from enum import Enum


class TableNames(str, Enum):
    INDIVIDUALS = "individuals"
    DIETARY_OPTIONS = "dietary_options"
    INVITATION_CODES = "invitation_codes"
