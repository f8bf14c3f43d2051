MISSING_SHORT_ID = 'MISSING_SHORT_ID'
LINK_NOT_FOUND = 'LINK_NOT_FOUND'
LINK_LOOKUP_FAILURE = 'LINK_LOOKUP_FAILURE'
MISSING_LINK_DATA = 'MISSING_LINK_DATA'
CONFIGURATION_FAILURE = 'CONFIGURATION_FAILURE'
REDIRECT_SUCCESS = 'REDIRECT_SUCCESS'
SMART_BANNER_SERVED = 'SMART_BANNER_SERVED'
