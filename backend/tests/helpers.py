from datetime import datetime

FUTURE = datetime(2099, 6, 1, 20, 0, 0)
PAST = datetime(2000, 1, 1, 12, 0, 0)
