"""GitHub license aspect — fingerprint a repository's license and enforce it as LICENSE."""

from licenseaspect.aspect import (
    LICENSE_ASPECT,
    ApplyContext,
    ApplyParameters,
    Aspect,
    AspectDetails,
    Configuration,
    ExtractContext,
    HttpConfiguration,
    LicenseAspect,
    LicenseLookup,
)
from licenseaspect.credentials import TokenCredentials, headers, is_token_credentials
from licenseaspect.models import Fingerprint, LicenseRecord
from licenseaspect.project import LocalProject, Project, RepoRef
from licenseaspect.registry import get_aspect, register_aspect, registered_aspects

register_aspect(LICENSE_ASPECT)

__version__ = "0.1.0"

__all__ = [
    "LICENSE_ASPECT",
    "ApplyContext",
    "ApplyParameters",
    "Aspect",
    "AspectDetails",
    "Configuration",
    "ExtractContext",
    "Fingerprint",
    "HttpConfiguration",
    "LicenseAspect",
    "LicenseLookup",
    "LicenseRecord",
    "LocalProject",
    "Project",
    "RepoRef",
    "TokenCredentials",
    "get_aspect",
    "headers",
    "is_token_credentials",
    "register_aspect",
    "registered_aspects",
]
