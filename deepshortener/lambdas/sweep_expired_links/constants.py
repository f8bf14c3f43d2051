SUCCESS = 'success'
ERROR = 'error'
