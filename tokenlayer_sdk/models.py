"""
Data models for the Token Layer SDK.
"""
from typing import Dict, Any, Optional, List, Type, TypeVar
from pydantic import BaseModel, Field, ValidationError

from .exceptions import ProtocolError, ProtocolMismatchError

SOURCES = ("Mainnet", "Testnet")

ModelT = TypeVar("ModelT", bound=BaseModel)


class ActionEnvelope(BaseModel):
    """Request body sent to the action endpoint"""
    source: str
    nonce: Optional[int] = None
    expires_after: int = Field(..., alias="expiresAfter")
    action: Dict[str, Any]
    signature: Optional[str] = None
    signature_chain_id: Optional[str] = Field(None, alias="signatureChainId")

    class Config:
        populate_by_name = True

    def to_wire(self) -> Dict[str, Any]:
        """Serialize to the JSON shape expected by the API"""
        return self.model_dump(by_alias=True, exclude_none=True)


class CreateTokenTransaction(BaseModel):
    """
    Transaction returned by the API for the caller to sign and send.

    Everything here is server-supplied and only checked when the batch is
    executed, so fields are kept loosely typed. The executor validates the
    chain metadata and converts addresses and amounts.
    """
    to: Optional[Any] = None
    data: Optional[Any] = "0x"
    value: Optional[Any] = 0
    gas_limit: Optional[Any] = Field(None, alias="gasLimit")
    chain_id: Optional[Any] = Field(None, alias="chainId")
    chain_slug: Optional[Any] = Field(None, alias="chainSlug")
    chain_type: Optional[Any] = Field(None, alias="chainType")

    class Config:
        populate_by_name = True
        extra = "allow"


class ExecutedTransaction(BaseModel):
    """A transaction that was signed and broadcast"""
    index: int
    chain_id: Optional[int] = Field(None, alias="chainId")
    hash: str
    to: str

    class Config:
        populate_by_name = True


class ActionResponse(BaseModel):
    """Response from the action endpoint, tagged by actionType"""
    action_type: str = Field(..., alias="actionType")

    class Config:
        populate_by_name = True
        extra = "allow"


class RegisterResponse(ActionResponse):
    wallet_address: Optional[str] = Field(None, alias="walletAddress")


class CreateTokenResponse(ActionResponse):
    transactions: Optional[List[CreateTokenTransaction]] = None
    transaction: Optional[CreateTokenTransaction] = None
    chain_id: Optional[Any] = Field(None, alias="chainId")


class CreateTokenResult(CreateTokenResponse):
    """createToken response, plus execution records when execution was requested"""
    executions: Optional[List[ExecutedTransaction]] = None


class InfoResponse(BaseModel):
    """Response from the info endpoint, tagged by type"""
    type: Optional[str] = None

    class Config:
        extra = "allow"


class BuilderDefaults(BaseModel):
    code: str
    fee: Optional[int] = None


class TokenLayerDefaults(BaseModel):
    """Fallback values injected into requests that omit them"""
    builder: Optional[BuilderDefaults] = None


def _validate(model: Type[ModelT], payload: Any, operation: str) -> ModelT:
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise ProtocolError(f"Malformed {operation} response: {e}") from e


def parse_action_response(
    payload: Dict[str, Any],
    expected: str,
    model: Type[ModelT] = ActionResponse,
) -> ModelT:
    """
    Validate the actionType tag of a response and convert it to a model.

    Args:
        payload: Decoded JSON response
        expected: Action name the request was made for
        model: Model class to build

    Returns:
        Instance of ``model``

    Raises:
        ProtocolMismatchError: If the actionType tag does not match
        ProtocolError: If the payload does not fit ``model``
    """
    actual = payload.get("actionType") if isinstance(payload, dict) else None
    if actual != expected:
        raise ProtocolMismatchError(expected, expected, actual)
    return _validate(model, payload, expected)


def parse_info_response(payload: Dict[str, Any], expected: Optional[str] = None) -> InfoResponse:
    """Convert an info response to a model, checking its type tag when ``expected`` is given"""
    if expected is not None:
        actual = payload.get("type") if isinstance(payload, dict) else None
        if actual != expected:
            raise ProtocolMismatchError(f"info.{expected}", expected, actual)
    return _validate(InfoResponse, payload, f"info.{expected}" if expected else "info")
