# -*- coding: utf-8 -*-
"""
Process-wide write serialization.

The backend serves a single local client, so one re-entrant lock around every
mutating service call is enough; nested calls (e.g. issue_all -> issue) reuse it.
"""

import threading
from functools import wraps

write_lock = threading.RLock()


def serialized(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        with write_lock:
            return func(*args, **kwargs)

    return wrapper
