"""
Password hashing, server-side sessions and the request-level auth gates.

Sessions are rows in ``sessoes``. The plaintext token only ever lives in the
client's cookie; the database keeps its SHA-256 hash. Passwords are bcrypt.

Role gating is a capability check done at the route boundary:
``Depends(current_user)`` for any logged-in user, ``Depends(require_master)``
for administration.
"""
from __future__ import annotations

import hashlib
import logging
import secrets
from dataclasses import dataclass
from datetime import timedelta

import bcrypt
from fastapi import Depends, HTTPException, Request
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from frigorifico_core import config
from frigorifico_core.db import get_session
from frigorifico_core.models import Sessao, Usuario
from frigorifico_core.time_utils import as_utc, utcnow

logger = logging.getLogger(__name__)

TIPO_MASTER = "master"
TIPO_CLIENTE = "cliente"


def hash_password(senha: str) -> str:
    salt = bcrypt.gensalt(rounds=config.BCRYPT_ROUNDS)
    return bcrypt.hashpw(senha.encode("utf-8"), salt).decode("utf-8")


def verify_password(senha: str, senha_hash: str) -> bool:
    try:
        return bcrypt.checkpw(senha.encode("utf-8"), senha_hash.encode("utf-8"))
    except ValueError:
        # malformed hash or oversized password
        return False


def generate_token() -> str:
    return secrets.token_hex(32)


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def is_master(usuario: Usuario) -> bool:
    return usuario.tipo == TIPO_MASTER


@dataclass
class SessionContext:
    usuario: Usuario
    sessao: Sessao


async def authenticate(session: AsyncSession, email: str, senha: str) -> Usuario | None:
    usuario = (await session.execute(
        select(Usuario).where(Usuario.email == email)
    )).scalar_one_or_none()
    if not usuario or not usuario.ativo:
        return None
    if not verify_password(senha, usuario.senha):
        return None
    return usuario


async def create_session(session: AsyncSession, usuario_id: int) -> tuple[Sessao, str]:
    """Create a session row; caller commits. Returns (row, plaintext token)."""
    token = generate_token()
    now = utcnow()
    row = Sessao(
        usuario_id=usuario_id,
        token_hash=hash_token(token),
        created_at=now,
        expires_at=now + timedelta(hours=config.SESSION_TTL_HOURS),
    )
    session.add(row)
    await session.flush()
    return row, token


async def resolve_session(session: AsyncSession, token: str | None) -> SessionContext | None:
    if not token:
        return None

    row = (await session.execute(
        select(Sessao).where(Sessao.token_hash == hash_token(token))
    )).scalar_one_or_none()
    if not row or row.revoked_at is not None:
        return None
    if as_utc(row.expires_at) <= utcnow():
        return None

    usuario = (await session.execute(
        select(Usuario).where(Usuario.id == row.usuario_id)
    )).scalar_one_or_none()
    if not usuario or not usuario.ativo:
        return None

    return SessionContext(usuario=usuario, sessao=row)


async def revoke_session(session: AsyncSession, token: str | None) -> bool:
    if not token:
        return False
    res = await session.execute(
        update(Sessao)
        .where(Sessao.token_hash == hash_token(token))
        .where(Sessao.revoked_at.is_(None))
        .values(revoked_at=utcnow())
    )
    return res.rowcount > 0


async def current_user(request: Request, session: AsyncSession = Depends(get_session)) -> Usuario:
    ctx = await resolve_session(session, request.cookies.get(config.SESSION_COOKIE_NAME))
    if not ctx:
        raise HTTPException(status_code=401, detail="Não autenticado")
    return ctx.usuario


async def require_master(usuario: Usuario = Depends(current_user)) -> Usuario:
    if not is_master(usuario):
        logger.warning("Forbidden admin access by usuario_id=%s", usuario.id)
        raise HTTPException(status_code=403, detail="Acesso restrito ao administrador")
    return usuario


async def ensure_master_user(session: AsyncSession) -> Usuario | None:
    """Create the bootstrap master account when no master exists yet."""
    existing = (await session.execute(
        select(Usuario).where(Usuario.tipo == TIPO_MASTER).limit(1)
    )).scalar_one_or_none()
    if existing:
        return None

    usuario = Usuario(
        nome=config.MASTER_NAME,
        email=config.MASTER_EMAIL.strip().lower(),
        senha=hash_password(config.MASTER_PASSWORD),
        tipo=TIPO_MASTER,
        ativo=True,
    )
    session.add(usuario)
    await session.commit()
    logger.info("Created bootstrap master user %s", usuario.email)
    return usuario
