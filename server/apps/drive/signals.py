"""Signals sent by drive operations.

``object_removed`` fires after an object key stops existing in a drive,
either because it was deleted or renamed away. Receivers get ``drive``
and ``key`` keyword arguments.
"""

from django.dispatch import Signal

object_removed = Signal()
