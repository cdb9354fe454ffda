from .associations import AssociationsClient
from .auth import AuthClient
from .categories import CategoriesClient
from .functions import FunctionsClient
from .rest import RestClient
from .roles import RolesClient
from .users import UsersClient
from .violations import ViolationsClient

__all__ = [
    "AssociationsClient",
    "AuthClient",
    "CategoriesClient",
    "FunctionsClient",
    "RestClient",
    "RolesClient",
    "UsersClient",
    "ViolationsClient",
]
