# layers/loop/python/loop_integration/kms_utils.py
"""
KMS helpers for secrets handed to the Loop integration Lambda through its environment.

The Loop API key may be stored either as plaintext or wrapped as
ENCRYPTED(base64_ciphertext). Wrapped values are decrypted with the encryption
context {"app": "loop-integration"}.

Usage:
    from loop_integration.kms_utils import kms_decrypt_wrapped, mask_secret

    api_key = kms_decrypt_wrapped(os.environ["API_KEY"])
    logger.info(f"Using key {mask_secret(api_key)}")
"""

import os
import base64
import logging
from typing import Optional

import boto3
from botocore.exceptions import ClientError

logger = logging.getLogger(__name__)

ENCRYPTION_CONTEXT = {"app": "loop-integration"}

# Cache KMS client
_kms_client = None


def _get_kms_client():
    """Get or create KMS client (cached)."""
    global _kms_client
    if _kms_client is None:
        region = os.environ.get("AWS_REGION") or os.environ.get("AWS_DEFAULT_REGION") or "us-east-2"
        _kms_client = boto3.client("kms", region_name=region)
    return _kms_client


def is_wrapped(value: Optional[str]) -> bool:
    return isinstance(value, str) and value.startswith("ENCRYPTED(") and value.endswith(")")


def _unwrap_encrypted(value: str) -> str:
    if is_wrapped(value):
        return value[len("ENCRYPTED("):-1]
    return value


def kms_decrypt(ciphertext_wrapped: str, kms_key_arn: Optional[str] = None) -> bytes:
    """
    Decrypt a KMS-encrypted value and return the plaintext bytes.

    Args:
        ciphertext_wrapped: ENCRYPTED(base64) value or raw base64 ciphertext
        kms_key_arn: optional key id; KMS can resolve the key from the ciphertext

    Raises:
        ValueError: if the value is empty or not valid base64
        ClientError: if KMS rejects the request
    """
    if not ciphertext_wrapped:
        raise ValueError("Cannot decrypt empty/None value")

    try:
        ciphertext_blob = base64.b64decode(_unwrap_encrypted(ciphertext_wrapped), validate=True)
    except Exception as e:
        raise ValueError(f"Invalid base64 ciphertext: {e}")

    decrypt_params = {
        "CiphertextBlob": ciphertext_blob,
        "EncryptionContext": ENCRYPTION_CONTEXT,
    }
    if kms_key_arn:
        decrypt_params["KeyId"] = kms_key_arn

    try:
        response = _get_kms_client().decrypt(**decrypt_params)
    except ClientError as e:
        error_code = e.response.get("Error", {}).get("Code", "Unknown")
        error_msg = e.response.get("Error", {}).get("Message", str(e))
        logger.error(f"[KMS] Decryption failed: {error_code} - {error_msg}")
        raise

    plaintext = response["Plaintext"]
    logger.info(f"[KMS] Successfully decrypted value ({len(plaintext)} bytes)")
    return plaintext


def kms_decrypt_wrapped(blob: Optional[str], kms_key_arn: Optional[str] = None) -> str:
    """
    Decrypt an ENCRYPTED(...) value to a UTF-8 string.
    Values that are not wrapped are returned unchanged (plaintext passthrough).

    Raises:
        ValueError: if decryption fails
    """
    if not blob:
        logger.warning("[KMS] decrypt_wrapped called with empty/None value")
        return ""

    if not is_wrapped(blob):
        return blob

    try:
        return kms_decrypt(blob, kms_key_arn).decode("utf-8")
    except Exception as e:
        logger.error(f"[KMS] Decryption failed: {e}")
        raise ValueError(f"Failed to decrypt wrapped value: {e}")


def mask_secret(secret: Optional[str], keep: int = 4) -> str:
    """Mask a secret for log lines, e.g. "********abcd"."""
    if not secret:
        return ""
    if len(secret) <= keep:
        return "*" * len(secret)
    return "*" * (len(secret) - keep) + secret[-keep:]


__all__ = [
    "kms_decrypt",
    "kms_decrypt_wrapped",
    "mask_secret",
    "ENCRYPTION_CONTEXT",
]
