"""
INFRASTRUCTURE SERVICES
========================

Serviços de infraestrutura do ImobCRM.

Organização:
- Segurança: Auth
- Negócio: Chaves, Imóveis, Imóveis importados
- Operacional: Export
- Cliente: CRM API client (httpx)
"""
