# schemas.py
from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict


class ProviderModel(BaseModel):
    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)


# -------- AUTH --------
class TokenResponse(ProviderModel):
    access_token: str
    token_type: str = "access_token"
    expires_in: int = 3600


# -------- TRANSACTIONS --------
class Party(ProviderModel):
    partyIdType: Literal["MSISDN", "EMAIL", "PARTY_CODE"] = "MSISDN"
    partyId: str


class Reason(ProviderModel):
    code: Optional[str] = None
    message: Optional[str] = None


class TransactionStatusResponse(ProviderModel):
    amount: Optional[str] = None
    currency: Optional[str] = None
    financialTransactionId: Optional[str] = None
    externalId: Optional[str] = None
    payer: Optional[Party] = None
    payee: Optional[Party] = None
    payerMessage: Optional[str] = None
    payeeNote: Optional[str] = None
    status: Optional[str] = None
    reason: Optional[Reason] = None


# -------- SANDBOX --------
class ApiKeyResponse(ProviderModel):
    apiKey: str


class SandboxKeys(BaseModel):
    api_user: str
    api_key: str
