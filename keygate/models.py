"""
Gateway Models
1. Registration flag
2. OpenRouter key records
3. Request/response bodies
"""
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# Registration flag
class RegistrationConfig(BaseModel):
    """Contents of the registration flag file"""
    model_config = ConfigDict(populate_by_name=True)

    registration_enabled: bool = Field(False, alias="registrationEnabled")

    def to_file(self) -> Dict[str, bool]:
        return self.model_dump(by_alias=True)


# OpenRouter key records
class ProvisionedKey(BaseModel):
    """
    A key as reported by OpenRouter. Fields the gateway does not use
    are kept so admin listings pass through untouched.
    """
    model_config = ConfigDict(extra="allow")

    name: str = ""
    hash: str = ""
    label: Optional[str] = None
    key: Optional[str] = None  # secret, only present right after creation
    limit: Optional[Union[int, float]] = None
    disabled: bool = False


class BulkFailure(BaseModel):
    hash: str
    error: str


class BulkResult(BaseModel):
    """Per-item outcome of a bulk admin operation"""
    attempted: int = 0
    succeeded: int = 0
    failed: int = 0
    failures: List[BulkFailure] = Field(default_factory=list)

    def record_success(self):
        self.succeeded += 1

    def record_failure(self, key_hash: str, error: str):
        self.failed += 1
        self.failures.append(BulkFailure(hash=key_hash, error=error))


# Request/response bodies
class InviteRequest(BaseModel):
    # Optional so a missing email is reported as "Email is required"
    email: Optional[str] = None


class InviteResponse(BaseModel):
    success: bool = True
    apiKey: str
    keyHash: str
    limit: Optional[Union[int, float]] = None
    name: str
    message: str = "Your OpenRouter API key has been created successfully."


class RegistrationStatus(BaseModel):
    registrationEnabled: bool


class KeyListing(BaseModel):
    data: List[Dict[str, Any]]


class BulkResponse(BaseModel):
    success: bool = True
    message: str
    summary: BulkResult
    data: Optional[List[Dict[str, Any]]] = None
