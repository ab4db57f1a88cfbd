from __future__ import annotations

from datetime import datetime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy import (
    Boolean, CheckConstraint, DateTime, Float, ForeignKey,
    Integer, Numeric, String, Text
)

from frigorifico_core.time_utils import utcnow

class Base(DeclarativeBase):
    pass

class Cliente(Base):
    __tablename__ = "clientes"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    nome: Mapped[str] = mapped_column(String(255), nullable=False)
    cnpj: Mapped[str] = mapped_column(String(32), unique=True, index=True)
    telefone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    endereco: Mapped[str | None] = mapped_column(String(500), nullable=True)
    ativo: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    data_cadastro: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

class Usuario(Base):
    __tablename__ = "usuarios"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    cliente_id: Mapped[int | None] = mapped_column(ForeignKey("clientes.id"), nullable=True, index=True)
    nome: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    # bcrypt hash, never the plain password
    senha: Mapped[str] = mapped_column(String(255), nullable=False)
    tipo: Mapped[str] = mapped_column(String(16), nullable=False)
    ativo: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    data_cadastro: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        CheckConstraint("tipo in ('master','cliente')", name="ck_usuario_tipo"),
    )

class Sessao(Base):
    __tablename__ = "sessoes"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    usuario_id: Mapped[int] = mapped_column(ForeignKey("usuarios.id", ondelete="CASCADE"), index=True)
    token_hash: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    revoked_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

class AnimalVivo(Base):
    __tablename__ = "animais_vivos"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    gta: Mapped[str] = mapped_column(String(64), nullable=False)
    brinco: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    fornecedor: Mapped[str] = mapped_column(String(255), nullable=False)
    especie: Mapped[str] = mapped_column(String(64), nullable=False)
    raca: Mapped[str] = mapped_column(String(64), nullable=False)
    sexo: Mapped[str] = mapped_column(String(16), nullable=False)
    idade_aproximada: Mapped[int] = mapped_column(Integer, nullable=False)  # months
    peso: Mapped[float] = mapped_column(Numeric(12, 3), nullable=False)
    data_cadastro: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    disponivel: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)

    __table_args__ = (
        CheckConstraint("peso > 0", name="ck_animal_vivo_peso_positive"),
    )

class AnimalAbatido(Base):
    __tablename__ = "animais_abatidos"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    animal_vivo_id: Mapped[int] = mapped_column(ForeignKey("animais_vivos.id"), unique=True, index=True)
    peso_vivo: Mapped[float] = mapped_column(Numeric(12, 3), nullable=False)
    peso_abatido: Mapped[float] = mapped_column(Numeric(12, 3), nullable=False)
    rendimento: Mapped[float] = mapped_column(Float, nullable=False)
    data_abate: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    observacoes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint("peso_abatido > 0", name="ck_abate_peso_positive"),
    )

class EstoqueFrio(Base):
    __tablename__ = "estoque_frio"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    animal_abatido_id: Mapped[int] = mapped_column(ForeignKey("animais_abatidos.id"), index=True)
    peso_embalado: Mapped[float] = mapped_column(Numeric(12, 3), nullable=False)
    temperatura: Mapped[float] = mapped_column(Numeric(6, 2), nullable=False)
    data_entrada: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    disponivel: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)

class Desoca(Base):
    __tablename__ = "desoca"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    estoque_frio_id: Mapped[int] = mapped_column(ForeignKey("estoque_frio.id"), index=True)
    responsavel: Mapped[str] = mapped_column(String(255), nullable=False)
    data_inicio: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    data_fim: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    finalizado: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)

    cortes: Mapped[list["Corte"]] = relationship(back_populates="desoca", order_by="Corte.id")

class Corte(Base):
    __tablename__ = "cortes"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    desoca_id: Mapped[int] = mapped_column(ForeignKey("desoca.id"), index=True)
    nome: Mapped[str] = mapped_column(String(255), nullable=False)
    tipo: Mapped[str] = mapped_column(String(64), nullable=False)
    peso: Mapped[float] = mapped_column(Numeric(12, 3), nullable=False)
    data_criacao: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    desoca: Mapped[Desoca] = relationship(back_populates="cortes")

    __table_args__ = (CheckConstraint("peso > 0", name="ck_corte_peso_positive"),)

class EstoqueFinal(Base):
    __tablename__ = "estoque_final"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    corte_id: Mapped[int] = mapped_column(ForeignKey("cortes.id"), index=True)
    codigo: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    quantidade: Mapped[float] = mapped_column(Numeric(12, 3), nullable=False)
    preco: Mapped[float] = mapped_column(Numeric(10, 2), nullable=False)
    validade: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    temperatura: Mapped[float] = mapped_column(Numeric(6, 2), nullable=False)
    categoria: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    disponivel: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)

    __table_args__ = (
        CheckConstraint("quantidade >= 0", name="ck_estoque_final_qty_non_negative"),
        CheckConstraint("preco > 0", name="ck_estoque_final_preco_positive"),
    )
