"""Exceções do domínio."""

from typing import List


class ImobCrmError(Exception):
    """Base para os erros do CRM."""


class ValidationError(ImobCrmError):
    """
    Erro de validação com várias mensagens agregadas.

    A mensagem final é a junção das mensagens com espaço, do jeito que
    o formulário exibe.
    """

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__(" ".join(self.errors))


class KeyWithdrawalValidationError(ValidationError):
    """Dados obrigatórios da retirada de chave ausentes."""


class InvalidCellValueError(ImobCrmError):
    """Valor ou coluna inválida na edição de célula da planilha."""


class KeyNotInPropertyError(ImobCrmError):
    """Chave enviada no cadastro não pertence ao imóvel."""

    def __init__(self, key_ids: List[int]):
        self.key_ids = list(key_ids)
        ids = ", ".join(str(key_id) for key_id in self.key_ids)
        super().__init__(f"Chave(s) {ids} não pertence(m) a este imóvel")


class UnknownResponsibleError(ImobCrmError):
    """Corretor responsável não existe ou está inativo."""


class RelatedRecordNotFoundError(ImobCrmError):
    """Registro vinculado (lead, imóvel) não existe para o usuário."""
