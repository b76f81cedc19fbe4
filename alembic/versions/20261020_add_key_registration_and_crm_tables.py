"""key registration fields, condominios, leads, oportunidades

Revision ID: 20261020_add_key_registration_and_crm_tables
Revises: 20261019_initial_schema
Create Date: 2026-10-20 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '20261020_add_key_registration_and_crm_tables'
down_revision: Union[str, None] = '20261019_initial_schema'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    ]


def upgrade() -> None:
    # Cadastro das chaves do imóvel (várias por imóvel)
    op.add_column('imovel_chaves', sa.Column('responsavel_tipo', sa.String(30), nullable=True))
    op.add_column(
        'imovel_chaves',
        sa.Column('disponivel_emprestimo', sa.Boolean(), nullable=False, server_default=sa.true()),
    )
    op.add_column('imovel_chaves', sa.Column('nome_contato', sa.String(200), nullable=True))
    op.add_column('imovel_chaves', sa.Column('telefone_contato', sa.String(30), nullable=True))
    op.add_column('imovel_chaves', sa.Column('observacoes', sa.Text(), nullable=True))

    op.create_table(
        'condominios',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('nome', sa.String(200), nullable=False),
        sa.Column('logo_url', sa.String(500), nullable=True),
        sa.Column('endereco', sa.String(300), nullable=True),
        sa.Column('numero', sa.String(20), nullable=True),
        sa.Column('bairro', sa.String(100), nullable=True),
        sa.Column('cidade', sa.String(100), nullable=True),
        sa.Column('estado', sa.String(2), nullable=True),
        sa.Column('area_terreno_m2', sa.Float(), nullable=True),
        sa.Column('ano_termino', sa.Integer(), nullable=True),
        sa.Column('construtora', sa.String(200), nullable=True),
        sa.Column('incorporadora', sa.String(200), nullable=True),
        sa.Column('estagio', sa.String(30), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_condominios_user_id', 'condominios', ['user_id'])
    op.create_index('ix_condominios_user_bairro', 'condominios', ['user_id', 'bairro'])

    op.create_table(
        'leads',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('nome', sa.String(200), nullable=False),
        sa.Column('telefone', sa.String(30), nullable=True),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('origem', sa.String(30), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='Novo'),
        sa.Column('observacoes', sa.Text(), nullable=True),
        sa.Column('responsavel_id', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['responsavel_id'], ['profiles.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_leads_user_id', 'leads', ['user_id'])
    op.create_index('ix_leads_user_status', 'leads', ['user_id', 'status'])

    op.create_table(
        'oportunidades',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('nome', sa.String(200), nullable=False),
        sa.Column('etapa', sa.String(30), nullable=False, server_default='Novos Leads'),
        sa.Column('valor_estimado', sa.Numeric(15, 2), nullable=True),
        sa.Column('data_fechamento_estimada', sa.Date(), nullable=True),
        sa.Column('observacoes', sa.Text(), nullable=True),
        sa.Column('lead_id', sa.Integer(), nullable=True),
        sa.Column('imovel_id', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['lead_id'], ['leads.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['imovel_id'], ['imoveis.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_oportunidades_user_id', 'oportunidades', ['user_id'])
    op.create_index('ix_oportunidades_user_etapa', 'oportunidades', ['user_id', 'etapa'])


def downgrade() -> None:
    op.drop_index('ix_oportunidades_user_etapa', table_name='oportunidades')
    op.drop_index('ix_oportunidades_user_id', table_name='oportunidades')
    op.drop_table('oportunidades')
    op.drop_index('ix_leads_user_status', table_name='leads')
    op.drop_index('ix_leads_user_id', table_name='leads')
    op.drop_table('leads')
    op.drop_index('ix_condominios_user_bairro', table_name='condominios')
    op.drop_index('ix_condominios_user_id', table_name='condominios')
    op.drop_table('condominios')
    op.drop_column('imovel_chaves', 'observacoes')
    op.drop_column('imovel_chaves', 'telefone_contato')
    op.drop_column('imovel_chaves', 'nome_contato')
    op.drop_column('imovel_chaves', 'disponivel_emprestimo')
    op.drop_column('imovel_chaves', 'responsavel_tipo')
