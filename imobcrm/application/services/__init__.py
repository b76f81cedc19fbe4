"""Serviços da aplicação (planilha de imóveis importados)."""
