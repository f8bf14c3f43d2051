INVALID_REQUEST_BODY = 'INVALID_REQUEST_BODY'
LINK_VALIDATION_FAILED = 'LINK_VALIDATION_FAILED'
LINK_STORE_FAILURE = 'LINK_STORE_FAILURE'
CONFIGURATION_FAILURE = 'CONFIGURATION_FAILURE'
LINK_CREATED = 'LINK_CREATED'
