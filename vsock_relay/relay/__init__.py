from .readiness import wait_readable, wait_writable
from .transfer import transfer, write_all
from .relay import Relay
