from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from rbac_script_generator.errors import ValidationError


class TargetApi(str, Enum):
    KUBERNETES = "Kubernetes RBAC"
    AWS_IAM = "AWS IAM"
    HASHICORP_VAULT = "HashiCorp Vault"
    AZURE_AD = "Azure AD"


class AccessType(str, Enum):
    USER = "User"
    ROLE = "Role"
    SERVICE_ACCOUNT = "Service_Account"


class OutputOsType(str, Enum):
    BASH = "Bash (Linux/macOS)"
    POWERSHELL = "PowerShell (Windows)"


# -----------------------------
# Option tables (UI contract)
# -----------------------------
TARGET_API_LABELS = {
    TargetApi.KUBERNETES: "Kubernetes RBAC",
    TargetApi.AWS_IAM: "AWS IAM",
    TargetApi.HASHICORP_VAULT: "HashiCorp Vault",
    TargetApi.AZURE_AD: "Azure AD",
}

# First entry of each list is the default when the platform changes.
ACCESS_TYPE_OPTIONS: dict[TargetApi, list[tuple[AccessType, str]]] = {
    TargetApi.KUBERNETES: [
        (AccessType.SERVICE_ACCOUNT, "Service Account"),
        (AccessType.USER, "User"),
        (AccessType.ROLE, "Role"),
    ],
    TargetApi.AWS_IAM: [
        (AccessType.ROLE, "Role"),
        (AccessType.USER, "User"),
    ],
    TargetApi.HASHICORP_VAULT: [
        (AccessType.ROLE, "Role"),
        (AccessType.USER, "User Pass Auth"),
    ],
    TargetApi.AZURE_AD: [
        (AccessType.USER, "User"),
        (AccessType.SERVICE_ACCOUNT, "Service Principal"),
    ],
}

OUTPUT_OS_TYPE_LABELS = {
    OutputOsType.BASH: "Bash (Linux/macOS)",
    OutputOsType.POWERSHELL: "PowerShell (Windows)",
}

MIN_DURATION_HOURS = 1
MAX_DURATION_HOURS = 24


def access_type_options(target_api: TargetApi) -> list[AccessType]:
    return [value for value, _ in ACCESS_TYPE_OPTIONS[TargetApi(target_api)]]


def access_type_label(target_api: TargetApi, access_type: AccessType) -> str:
    for value, label in ACCESS_TYPE_OPTIONS[TargetApi(target_api)]:
        if value == access_type:
            return label
    return AccessType(access_type).value


def default_access_type(target_api: TargetApi) -> AccessType:
    return access_type_options(target_api)[0]


@dataclass(frozen=True)
class AccessRequest:
    """
    Structured description of a temporary access grant to be scripted.

    Every field is embedded verbatim in the prompt. Construction enforces the
    same rules the form does, so an instance is always a valid request:
    - access_type must be one of the kinds offered for target_api
    - duration_hours is an integer between 1 and 24
    - the free-text fields are not blank
    """
    target_api: TargetApi
    access_type: AccessType
    principal_name: str
    required_permissions: str  # raw, comma-separated
    duration_hours: int
    output_os_type: OutputOsType
    target_environment: str

    def __post_init__(self) -> None:
        try:
            target_api = TargetApi(self.target_api)
            access_type = AccessType(self.access_type)
            output_os_type = OutputOsType(self.output_os_type)
        except ValueError as e:
            raise ValidationError(str(e)) from e

        if access_type not in access_type_options(target_api):
            raise ValidationError(
                f"Access type {access_type.value!r} is not available for {target_api.value}."
            )

        if isinstance(self.duration_hours, bool) or not isinstance(self.duration_hours, int):
            raise ValidationError("duration_hours must be an integer.")
        if not MIN_DURATION_HOURS <= self.duration_hours <= MAX_DURATION_HOURS:
            raise ValidationError(
                f"duration_hours must be between {MIN_DURATION_HOURS} and {MAX_DURATION_HOURS}."
            )

        for name in ("principal_name", "required_permissions", "target_environment"):
            if not (getattr(self, name) or "").strip():
                raise ValidationError(f"{name} is required.")

        # normalise plain strings coming from the UI into the enums
        object.__setattr__(self, "target_api", target_api)
        object.__setattr__(self, "access_type", access_type)
        object.__setattr__(self, "output_os_type", output_os_type)

    def permissions(self) -> list[str]:
        return [p.strip() for p in self.required_permissions.split(",") if p.strip()]

    def with_target_api(self, target_api: TargetApi) -> AccessRequest:
        """Switch platform; the access type falls back to the platform's first choice."""
        target_api = TargetApi(target_api)
        return replace(self, target_api=target_api, access_type=default_access_type(target_api))


DEFAULT_REQUEST = AccessRequest(
    target_api=TargetApi.KUBERNETES,
    access_type=AccessType.SERVICE_ACCOUNT,
    principal_name="temp-user-01",
    required_permissions="pods/get, namespaces/list",
    duration_hours=1,
    output_os_type=OutputOsType.BASH,
    target_environment="staging-cluster",
)
