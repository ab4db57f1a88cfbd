"""frigorifico pipeline tables

Revision ID: 0001_frigorifico_pipeline
Revises:
Create Date: 2026-10-17
"""
from alembic import op
import sqlalchemy as sa

revision = "0001_frigorifico_pipeline"
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table(
        "clientes",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("nome", sa.String(length=255), nullable=False),
        sa.Column("cnpj", sa.String(length=32), nullable=False),
        sa.Column("telefone", sa.String(length=32), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("endereco", sa.String(length=500), nullable=True),
        sa.Column("ativo", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("data_cadastro", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_clientes_cnpj", "clientes", ["cnpj"], unique=True)

    op.create_table(
        "usuarios",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("cliente_id", sa.Integer(), sa.ForeignKey("clientes.id"), nullable=True),
        sa.Column("nome", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("senha", sa.String(length=255), nullable=False),
        sa.Column("tipo", sa.String(length=16), nullable=False),
        sa.Column("ativo", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("data_cadastro", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("tipo in ('master','cliente')", name="ck_usuario_tipo"),
    )
    op.create_index("ix_usuarios_email", "usuarios", ["email"], unique=True)
    op.create_index("ix_usuarios_cliente_id", "usuarios", ["cliente_id"])

    op.create_table(
        "sessoes",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("usuario_id", sa.Integer(), sa.ForeignKey("usuarios.id", ondelete="CASCADE"), nullable=False),
        sa.Column("token_hash", sa.String(length=64), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("revoked_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_sessoes_token_hash", "sessoes", ["token_hash"], unique=True)
    op.create_index("ix_sessoes_usuario_id", "sessoes", ["usuario_id"])

    op.create_table(
        "animais_vivos",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("gta", sa.String(length=64), nullable=False),
        sa.Column("brinco", sa.String(length=64), nullable=False),
        sa.Column("fornecedor", sa.String(length=255), nullable=False),
        sa.Column("especie", sa.String(length=64), nullable=False),
        sa.Column("raca", sa.String(length=64), nullable=False),
        sa.Column("sexo", sa.String(length=16), nullable=False),
        sa.Column("idade_aproximada", sa.Integer(), nullable=False),
        sa.Column("peso", sa.Numeric(12, 3), nullable=False),
        sa.Column("data_cadastro", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("disponivel", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.CheckConstraint("peso > 0", name="ck_animal_vivo_peso_positive"),
    )
    op.create_index("ix_animais_vivos_brinco", "animais_vivos", ["brinco"], unique=True)
    op.create_index("ix_animais_vivos_disponivel", "animais_vivos", ["disponivel"])

    op.create_table(
        "animais_abatidos",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("animal_vivo_id", sa.Integer(), sa.ForeignKey("animais_vivos.id"), nullable=False),
        sa.Column("peso_vivo", sa.Numeric(12, 3), nullable=False),
        sa.Column("peso_abatido", sa.Numeric(12, 3), nullable=False),
        sa.Column("rendimento", sa.Float(), nullable=False),
        sa.Column("data_abate", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("observacoes", sa.Text(), nullable=True),
        sa.CheckConstraint("peso_abatido > 0", name="ck_abate_peso_positive"),
    )
    op.create_index("ix_animais_abatidos_animal_vivo_id", "animais_abatidos", ["animal_vivo_id"], unique=True)

    op.create_table(
        "estoque_frio",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("animal_abatido_id", sa.Integer(), sa.ForeignKey("animais_abatidos.id"), nullable=False),
        sa.Column("peso_embalado", sa.Numeric(12, 3), nullable=False),
        sa.Column("temperatura", sa.Numeric(6, 2), nullable=False),
        sa.Column("data_entrada", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("disponivel", sa.Boolean(), nullable=False, server_default=sa.true()),
    )
    op.create_index("ix_estoque_frio_animal_abatido_id", "estoque_frio", ["animal_abatido_id"])
    op.create_index("ix_estoque_frio_disponivel", "estoque_frio", ["disponivel"])

    op.create_table(
        "desoca",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("estoque_frio_id", sa.Integer(), sa.ForeignKey("estoque_frio.id"), nullable=False),
        sa.Column("responsavel", sa.String(length=255), nullable=False),
        sa.Column("data_inicio", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("data_fim", sa.DateTime(timezone=True), nullable=True),
        sa.Column("finalizado", sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index("ix_desoca_estoque_frio_id", "desoca", ["estoque_frio_id"])
    op.create_index("ix_desoca_finalizado", "desoca", ["finalizado"])

    op.create_table(
        "cortes",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("desoca_id", sa.Integer(), sa.ForeignKey("desoca.id"), nullable=False),
        sa.Column("nome", sa.String(length=255), nullable=False),
        sa.Column("tipo", sa.String(length=64), nullable=False),
        sa.Column("peso", sa.Numeric(12, 3), nullable=False),
        sa.Column("data_criacao", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("peso > 0", name="ck_corte_peso_positive"),
    )
    op.create_index("ix_cortes_desoca_id", "cortes", ["desoca_id"])

    op.create_table(
        "estoque_final",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("corte_id", sa.Integer(), sa.ForeignKey("cortes.id"), nullable=False),
        sa.Column("codigo", sa.String(length=64), nullable=False),
        sa.Column("quantidade", sa.Numeric(12, 3), nullable=False),
        sa.Column("preco", sa.Numeric(10, 2), nullable=False),
        sa.Column("validade", sa.DateTime(timezone=True), nullable=False),
        sa.Column("temperatura", sa.Numeric(6, 2), nullable=False),
        sa.Column("categoria", sa.String(length=64), nullable=False),
        sa.Column("disponivel", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.CheckConstraint("quantidade >= 0", name="ck_estoque_final_qty_non_negative"),
        sa.CheckConstraint("preco > 0", name="ck_estoque_final_preco_positive"),
    )
    op.create_index("ix_estoque_final_codigo", "estoque_final", ["codigo"], unique=True)
    op.create_index("ix_estoque_final_corte_id", "estoque_final", ["corte_id"])
    op.create_index("ix_estoque_final_categoria", "estoque_final", ["categoria"])
    op.create_index("ix_estoque_final_disponivel", "estoque_final", ["disponivel"])

def downgrade():
    for table in [
        "estoque_final", "cortes", "desoca", "estoque_frio",
        "animais_abatidos", "animais_vivos", "sessoes", "usuarios", "clientes",
    ]:
        op.drop_table(table)
