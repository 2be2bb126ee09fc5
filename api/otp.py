"""
OTP Router

POST /otp/send    issue a 6-digit code and email it
POST /otp/verify  check a code once, then invalidate it

The caller identifies the user by userId in the body; there is no session
or token check here (see DESIGN.md, open questions). Guessing is bounded by
the per-client rate limit and the service's failed-attempt cap.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from services.mail import EmailSendError
from services.otp import OTPService, VerifyOutcome

from .dependencies import enforce_rate_limit, get_otp_service
from .schemas import SendOTPRequest, VerifyOTPRequest

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/otp",
    tags=["otp"],
    dependencies=[Depends(enforce_rate_limit)],
)

_VERIFY_FAILURES = {
    VerifyOutcome.NOT_FOUND: "No OTP sent for this user",
    VerifyOutcome.EXPIRED: "OTP expired",
    VerifyOutcome.INVALID: "Invalid OTP",
}


@router.post("/send")
async def send_otp(body: SendOTPRequest, service: OTPService = Depends(get_otp_service)):
    """Issue a code for userId and email it. The code is never echoed back."""
    try:
        message_id = await service.issue(str(body.user_id), body.email)
    except EmailSendError as e:
        logger.error(f"OTP send error: {e}")
        return JSONResponse(status_code=500, content={"message": "Failed to send OTP"})

    return {"message": "OTP sent successfully", "messageId": message_id}


@router.post("/verify")
async def verify_otp(body: VerifyOTPRequest, service: OTPService = Depends(get_otp_service)):
    outcome = service.verify(str(body.user_id), body.otp)
    if outcome != VerifyOutcome.VERIFIED:
        return JSONResponse(status_code=401, content={"message": _VERIFY_FAILURES[outcome]})
    return {"message": "OTP Verified Successfully"}
