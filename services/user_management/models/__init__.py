from .departments import Department
from .users import PortalUser, UserRole
