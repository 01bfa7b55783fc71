from .base import StatusRepository as StatusRepository
from .memory import InMemoryStatusRepository as InMemoryStatusRepository
from .models import Endpoint as Endpoint
