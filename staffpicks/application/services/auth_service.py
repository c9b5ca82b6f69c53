"""Auth service — password hashing, the session token, login and signup."""

import hashlib
import math
import re
from datetime import datetime, timedelta, timezone
from typing import Optional

import structlog
from bson import ObjectId
from jose import jwe, jwt
from jose.exceptions import JOSEError
from passlib.context import CryptContext
from pydantic import ValidationError

from staffpicks.application.services.slugs import generate_slug, store_code, unique_slug
from staffpicks.config import get_settings
from staffpicks.core.exceptions import (
    AccountLockedException,
    ConflictException,
    ForbiddenException,
    RateLimitExceededException,
    UnauthorizedException,
    ValidationException,
)
from staffpicks.domain.models.base import utcnow
from staffpicks.domain.models.company import Company, CompanyPlan, CompanyStatus
from staffpicks.domain.models.store import Store, StoreStatus
from staffpicks.domain.models.user import User, UserStatus, full_name, is_locked
from staffpicks.domain.repositories.tenant_repository import (
    CompanyRepository,
    RateLimitRepository,
    StoreRepository,
)
from staffpicks.domain.repositories.user_repository import UserRepository
from staffpicks.domain.roles import UserRole
from staffpicks.domain.schemas.auth import SessionUser, SignupRequest

settings = get_settings()
logger = structlog.get_logger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS)

PASSWORD_PATTERN = re.compile(r"^(?=.*\d)(?=.*[a-z])(?=.*[A-Z]).{8,}$")
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

DEFAULT_STORE_NAME = "Main Store"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def validate_password_policy(password: str) -> None:
    if not PASSWORD_PATTERN.match(password or ""):
        raise ValidationException(
            "Password must be at least 8 characters and include a digit, "
            "a lowercase letter and an uppercase letter"
        )


def normalize_email(email: Optional[str]) -> str:
    """Lower-case and validate an email address."""
    value = (email or "").strip().lower()
    if not EMAIL_PATTERN.match(value):
        raise ValidationException("Invalid email address")
    return value


# ── Session token ─────────────────────────────────────────────


def _session_key() -> bytes:
    # A256GCM needs exactly 32 bytes
    return hashlib.sha256(settings.SESSION_SECRET.encode()).digest()


def create_session_token(user: SessionUser) -> str:
    """Sign the claims as a JWT, then encrypt that JWT as a JWE."""
    expire = datetime.now(timezone.utc) + timedelta(seconds=settings.SESSION_MAX_AGE_SECONDS)
    claims = user.model_dump(by_alias=True, mode="json", exclude_none=True)
    claims["exp"] = expire
    signed = jwt.encode(claims, settings.SESSION_SECRET, algorithm=settings.JWT_ALGORITHM)
    return jwe.encrypt(signed, _session_key(), algorithm="dir", encryption="A256GCM").decode("ascii")


def decode_session_token(token: str) -> Optional[SessionUser]:
    try:
        signed = jwe.decrypt(token, _session_key()).decode("ascii")
        claims = jwt.decode(signed, settings.SESSION_SECRET, algorithms=[settings.JWT_ALGORITHM])
        return SessionUser.model_validate(claims)
    except (JOSEError, ValidationError, UnicodeDecodeError):
        return None


def build_session_user(user: dict, company: Optional[dict] = None) -> SessionUser:
    return SessionUser(
        user_id=str(user["_id"]),
        email=user["email"],
        name=full_name(user),
        role=user["role"],
        company_id=str(user["companyId"]) if user.get("companyId") else None,
        company_name=company["name"] if company else None,
        store_id=str(user["storeId"]) if user.get("storeId") else None,
    )


# ── Login ─────────────────────────────────────────────────────


def login(
    users: UserRepository,
    companies: CompanyRepository,
    email: Optional[str],
    password: Optional[str],
    client_ip: Optional[str] = None,
) -> SessionUser:
    if not email or not password:
        raise ValidationException("Email and password are required")

    user = users.get_by_email(email)
    if user is None or user.get("deletedAt") is not None:
        logger.info("Login rejected", reason="unknown_email")
        raise UnauthorizedException("Invalid email or password")

    now = utcnow()
    if is_locked(user, now):
        minutes = math.ceil((user["lockedUntil"] - now).total_seconds() / 60)
        raise AccountLockedException(
            f"Account locked due to too many failed attempts. Try again in {minutes} minutes.",
            {"minutesRemaining": minutes},
        )

    if not verify_password(password, user["passwordHash"]):
        # A lapsed lock starts a fresh count
        attempts = 0 if user.get("lockedUntil") else user.get("failedLoginAttempts", 0)
        attempts += 1

        if attempts >= settings.MAX_LOGIN_ATTEMPTS:
            locked_until = now + timedelta(minutes=settings.LOCKOUT_DURATION_MINUTES)
            users.record_failed_login(user["_id"], attempts, locked_until)
            logger.warning("Account locked", user_id=str(user["_id"]), attempts=attempts)
            raise AccountLockedException(
                f"Too many failed attempts. Account locked for {settings.LOCKOUT_DURATION_MINUTES} minutes.",
                {"minutesRemaining": settings.LOCKOUT_DURATION_MINUTES},
            )

        users.record_failed_login(user["_id"], attempts, None)
        remaining = settings.MAX_LOGIN_ATTEMPTS - attempts
        logger.info("Login failed", user_id=str(user["_id"]), attempts=attempts)
        raise UnauthorizedException(
            f"Invalid email or password. {remaining} attempts remaining.",
            {"attemptsRemaining": remaining},
        )

    if user.get("status", UserStatus.ACTIVE.value) != UserStatus.ACTIVE.value:
        logger.info("Login refused for non-active account", user_id=str(user["_id"]), status=user.get("status"))
        raise ForbiddenException("Account is not active")

    users.record_successful_login(user["_id"], client_ip, now)
    company = companies.get_by_id(user["companyId"]) if user.get("companyId") else None

    logger.info("Login succeeded", user_id=str(user["_id"]), role=user["role"])
    return build_session_user(user, company)


# ── Signup ────────────────────────────────────────────────────


def check_signup_rate_limit(rate_limits: RateLimitRepository, client_ip: str) -> None:
    """Count one signup attempt for this IP in the current fixed window."""
    window = settings.SIGNUP_RATE_WINDOW_MINUTES * 60
    now = datetime.now(timezone.utc)
    window_index = int(now.timestamp()) // window
    window_end = datetime.fromtimestamp((window_index + 1) * window, timezone.utc).replace(tzinfo=None)

    hits = rate_limits.hit(f"signup:{client_ip}:{window_index}", window_end)
    if hits > settings.SIGNUP_RATE_LIMIT:
        logger.warning("Signup rate limit exceeded", client_ip=client_ip, hits=hits)
        raise RateLimitExceededException(
            f"Too many attempts. Try again in {settings.SIGNUP_RATE_WINDOW_MINUTES} minutes."
        )


def signup(
    users: UserRepository,
    companies: CompanyRepository,
    stores: StoreRepository,
    body: SignupRequest,
) -> SessionUser:
    """Bootstrap a tenant: company, default store and its company admin.

    The three inserts are not one transaction. If a later insert fails the
    earlier documents are deleted again before the error propagates.
    """
    company_name = (body.company_name or "").strip()
    first_name = (body.first_name or "").strip()
    last_name = (body.last_name or "").strip()
    if not company_name or not first_name or not last_name or not body.email or not body.password:
        raise ValidationException("All required fields must be filled in")
    if body.password != body.confirm_password:
        raise ValidationException("Passwords do not match")
    validate_password_policy(body.password)
    email = normalize_email(body.email)

    if users.get_by_email(email) is not None:
        raise ConflictException("An account with this email already exists")

    slug = unique_slug(generate_slug(company_name) or "company", companies.slug_taken)
    store_name = (body.store_name or "").strip() or DEFAULT_STORE_NAME

    created: list[tuple] = []
    try:
        company = companies.create(
            Company(
                name=company_name,
                slug=slug,
                status=CompanyStatus.TRIAL,
                plan=CompanyPlan.STARTER,
                trial_ends_at=utcnow() + timedelta(days=settings.TRIAL_DAYS),
                contact_email=email,
            )
        )
        created.append((companies, company["_id"]))

        store = stores.create(
            Store(
                company_id=company["_id"],
                code=store_code(store_name) or "MAIN",
                name=store_name,
                status=StoreStatus.ACTIVE,
                contact_email=email,
            )
        )
        created.append((stores, store["_id"]))

        user = users.create(
            User(
                company_id=company["_id"],
                first_name=first_name,
                last_name=last_name,
                email=email,
                password_hash=hash_password(body.password),
                role=UserRole.COMPANY_ADMIN,
            )
        )
    except Exception:
        logger.exception("Signup failed, rolling back", company_slug=slug)
        for repo, doc_id in reversed(created):
            repo.delete(doc_id)
        raise

    logger.info("Company signed up", company_id=str(company["_id"]), store_id=str(store["_id"]))
    return build_session_user(user, company)


def revalidate_session(users: UserRepository, session: SessionUser) -> Optional[dict]:
    """Re-read the session's user; None when it may no longer use the session."""
    if not ObjectId.is_valid(session.user_id):
        return None
    user = users.get_active(ObjectId(session.user_id))
    if user is None or user.get("status") != UserStatus.ACTIVE.value:
        return None
    return user
