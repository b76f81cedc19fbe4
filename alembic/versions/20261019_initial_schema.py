"""initial schema: profiles, imoveis, chaves, imoveis importados

Revision ID: 20261019_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '20261019_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    ]


def upgrade() -> None:
    """Create CRM tables."""

    op.create_table(
        'profiles',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('agencia', sa.String(100), nullable=True),
        sa.Column('active', sa.Boolean(), nullable=False, server_default='true'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_profiles_email', 'profiles', ['email'], unique=True)

    op.create_table(
        'imoveis',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('codigo', sa.String(50), nullable=False),
        sa.Column('tipo_imovel', sa.String(50), nullable=False),

        # Localização
        sa.Column('logradouro', sa.String(300), nullable=False),
        sa.Column('numero', sa.String(20), nullable=True),
        sa.Column('bairro', sa.String(100), nullable=True),
        sa.Column('cidade', sa.String(100), nullable=True),

        # {"venda_ativo": bool, "locacao_ativo": bool, "temporada_ativo": bool}
        sa.Column('dados_contrato', postgresql.JSONB(astext_type=sa.Text()), nullable=True, server_default='{}'),

        sa.Column('dormitorios', sa.Integer(), nullable=True),
        sa.Column('suites', sa.Integer(), nullable=True),
        sa.Column('vagas', sa.Integer(), nullable=True),
        sa.Column('valor_venda', sa.Numeric(15, 2), nullable=True),
        sa.Column('valor_locacao', sa.Numeric(15, 2), nullable=True),
        sa.Column('status_aprovacao', sa.String(30), nullable=True, server_default='pendente'),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_imoveis_user_id', 'imoveis', ['user_id'])
    op.create_index('ix_imoveis_codigo', 'imoveis', ['codigo'])
    op.create_index('ix_imoveis_tipo_imovel', 'imoveis', ['tipo_imovel'])
    op.create_index('ix_imoveis_bairro', 'imoveis', ['bairro'])
    op.create_index('ix_imoveis_user_bairro', 'imoveis', ['user_id', 'bairro'])

    op.create_table(
        'imagens_imovel',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('imovel_id', sa.Integer(), nullable=False),
        sa.Column('url', sa.String(500), nullable=False),
        sa.Column('legenda', sa.String(200), nullable=True),
        sa.Column('ordem', sa.Integer(), nullable=False, server_default='0'),
        *_timestamps(),
        sa.ForeignKeyConstraint(['imovel_id'], ['imoveis.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_imagens_imovel_imovel_id', 'imagens_imovel', ['imovel_id'])

    op.create_table(
        'imovel_chaves',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('imovel_id', sa.Integer(), nullable=True),
        sa.Column('codigo_chave', sa.String(50), nullable=False),
        sa.Column('agencia', sa.String(100), nullable=True),

        # Disponível | Retirada (Atrasada é calculada na leitura)
        sa.Column('status', sa.String(20), nullable=False, server_default='Disponível'),

        sa.Column('retirada_por', sa.String(200), nullable=True),
        sa.Column('tipo_retirada', sa.String(20), nullable=True),
        sa.Column('motivo', sa.String(20), nullable=True),
        sa.Column('previsao_entrega', sa.Date(), nullable=True),
        sa.Column('hora_entrega', sa.Time(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['imovel_id'], ['imoveis.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_imovel_chaves_user_id', 'imovel_chaves', ['user_id'])
    op.create_index('ix_imovel_chaves_imovel_id', 'imovel_chaves', ['imovel_id'])
    op.create_index('ix_imovel_chaves_user_created', 'imovel_chaves', ['user_id', 'created_at'])

    # Colunas com os nomes da planilha de origem
    op.create_table(
        'imoveis_importados',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('Responsáveis', sa.String(100), nullable=True),
        sa.Column('Feedback', sa.Text(), nullable=True),
        sa.Column('Referencia', sa.String(100), nullable=True),
        sa.Column('Categoria', sa.String(100), nullable=True),
        sa.Column('Endereco', sa.String(300), nullable=True),
        sa.Column('Bairro', sa.String(100), nullable=True),
        sa.Column('Andar', sa.Integer(), nullable=True),
        sa.Column('AreaTotal', sa.String(50), nullable=True),
        sa.Column('AreaPrivada', sa.Float(), nullable=True),
        sa.Column('Dorms', sa.BigInteger(), nullable=True),
        sa.Column('Suites', sa.String(50), nullable=True),
        sa.Column('Vagas', sa.String(50), nullable=True),
        sa.Column('Venda', sa.String(50), nullable=True),
        sa.Column('Aluguel', sa.String(50), nullable=True),
        sa.Column('NomeProprietario', sa.String(200), nullable=True),
        sa.Column('Fones', sa.String(100), nullable=True),
        sa.Column('Email', sa.String(200), nullable=True),
        sa.Column('Exclusivo', sa.String(20), nullable=True),
        sa.Column('IDExterno', sa.BigInteger(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_imoveis_importados_bairro', 'imoveis_importados', ['Bairro'])
    op.create_index('ix_imoveis_importados_categoria', 'imoveis_importados', ['Categoria'])


def downgrade() -> None:
    """Drop CRM tables."""
    op.drop_index('ix_imoveis_importados_categoria', table_name='imoveis_importados')
    op.drop_index('ix_imoveis_importados_bairro', table_name='imoveis_importados')
    op.drop_table('imoveis_importados')
    op.drop_index('ix_imovel_chaves_user_created', table_name='imovel_chaves')
    op.drop_index('ix_imovel_chaves_imovel_id', table_name='imovel_chaves')
    op.drop_index('ix_imovel_chaves_user_id', table_name='imovel_chaves')
    op.drop_table('imovel_chaves')
    op.drop_index('ix_imagens_imovel_imovel_id', table_name='imagens_imovel')
    op.drop_table('imagens_imovel')
    op.drop_index('ix_imoveis_user_bairro', table_name='imoveis')
    op.drop_index('ix_imoveis_bairro', table_name='imoveis')
    op.drop_index('ix_imoveis_tipo_imovel', table_name='imoveis')
    op.drop_index('ix_imoveis_codigo', table_name='imoveis')
    op.drop_index('ix_imoveis_user_id', table_name='imoveis')
    op.drop_table('imoveis')
    op.drop_index('ix_profiles_email', table_name='profiles')
    op.drop_table('profiles')
