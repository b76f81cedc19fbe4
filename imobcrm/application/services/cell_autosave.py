"""
AUTOSAVE DE CÉLULAS
====================

Salvamento automático da planilha, célula a célula.

Cada célula (linha, coluna) tem a sua edição pendente e a sua tarefa
asyncio com atraso. Cada tecla cancela e reagenda a tarefa; quando o
tempo expira, ou no blur, o valor é comparado ao último valor gravado e,
se mudou, enviado como uma atualização independente.

- Moeda: no blur o texto é formatado (R$) antes de comparar/enviar
- Seletor (responsável): grava na hora, sem atraso
- Falha ao gravar: chama ``on_error`` (a planilha recarrega a página);
  sem ``on_error`` a edição continua pendente para nova tentativa
"""

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, Iterable, Optional, Set, Tuple

from imobcrm.config import get_settings
from imobcrm.domain.entities.imovel_importado import CURRENCY_COLUMNS, RESPONSIBLE_COLUMN
from imobcrm.domain.services.currency import format_text_to_currency

logger = logging.getLogger(__name__)

CellKey = Tuple[int, str]
CommitFn = Callable[[int, str, Any], Awaitable[Any]]
ErrorHook = Callable[[CellKey, Exception], Any]


def _normalize(value: Any) -> str:
    return "" if value is None else str(value)


class CellAutosaver:
    """Edições pendentes e timers por célula."""

    def __init__(
        self,
        commit: CommitFn,
        delay: Optional[float] = None,
        on_error: Optional[ErrorHook] = None,
        currency_columns: Iterable[str] = CURRENCY_COLUMNS,
        immediate_columns: Iterable[str] = (RESPONSIBLE_COLUMN,),
    ):
        self._commit = commit
        self.delay = get_settings().autosave_delay_seconds if delay is None else delay
        self.on_error = on_error
        self.currency_columns: Set[str] = set(currency_columns)
        self.immediate_columns: Set[str] = set(immediate_columns)

        self._persisted: Dict[CellKey, Any] = {}
        self._pending: Dict[CellKey, Any] = {}
        self._tasks: Dict[CellKey, asyncio.Task] = {}
        # Toda tarefa criada fica aqui até terminar (timer e gravação)
        self._running: Set[asyncio.Task] = set()

    # =========================================================================
    # ESTADO
    # =========================================================================

    def load(self, rows: Iterable[Dict[str, Any]], columns: Iterable[str]) -> None:
        """Descarta pendências e registra os valores gravados das linhas carregadas."""
        self.cancel_all()
        self._persisted.clear()
        columns = list(columns)
        for row in rows:
            for column in columns:
                self._persisted[(row["id"], column)] = row.get(column)

    def value(self, row_id: int, column: str) -> Any:
        """Valor exibido: pendente se houver, senão o gravado."""
        key = (row_id, column)
        if key in self._pending:
            return self._pending[key]
        return self._persisted.get(key)

    def persisted(self, row_id: int, column: str) -> Any:
        return self._persisted.get((row_id, column))

    def is_pending(self, row_id: int, column: str) -> bool:
        return (row_id, column) in self._pending

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    @property
    def active_tasks(self) -> int:
        return len(self._running)

    # =========================================================================
    # EVENTOS
    # =========================================================================

    def input(self, row_id: int, column: str, value: Any) -> None:
        """Tecla digitada: guarda o valor e reinicia o timer da célula."""
        key = (row_id, column)
        self._pending[key] = value
        self._cancel_task(key)
        task = asyncio.create_task(self._delayed_flush(key))
        self._tasks[key] = task
        self._running.add(task)
        task.add_done_callback(self._task_done)

    async def blur(self, row_id: int, column: str) -> bool:
        """Saída da célula: formata moeda e grava sem esperar o timer."""
        key = (row_id, column)
        self._cancel_task(key)

        if key not in self._pending:
            return False

        if column in self.currency_columns:
            self._pending[key] = format_text_to_currency(_normalize(self._pending[key]))

        return await self.flush(row_id, column)

    async def select(self, row_id: int, column: str, value: Any) -> bool:
        """Seletor: grava imediatamente."""
        key = (row_id, column)
        self._cancel_task(key)
        self._pending[key] = value
        return await self.flush(row_id, column)

    async def flush(self, row_id: int, column: str) -> bool:
        """
        Grava a edição pendente da célula, se diferente da gravada.

        Returns:
            True se enviou e gravou
        """
        key = (row_id, column)
        if key not in self._pending:
            return False

        value = self._pending.pop(key)

        if self._unchanged(column, value, self._persisted.get(key)):
            return False

        try:
            result = await self._commit(row_id, column, value)
        except Exception as e:
            logger.error(f"Erro ao salvar célula {row_id}/{column}: {e}")
            if self.on_error is None:
                self._pending.setdefault(key, value)
                raise
            outcome = self.on_error(key, e)
            if inspect.isawaitable(outcome):
                await outcome
            return False

        if isinstance(result, dict) and column in result:
            self._persisted[key] = result[column]
        else:
            self._persisted[key] = value
        return True

    async def flush_all(self) -> None:
        for row_id, column in list(self._pending):
            self._cancel_task((row_id, column))
            await self.flush(row_id, column)

    def cancel_all(self) -> None:
        """Cancela timers e descarta todas as edições pendentes."""
        for key in list(self._tasks):
            self._cancel_task(key)
        self._pending.clear()

    # =========================================================================
    # INTERNOS
    # =========================================================================

    def _unchanged(self, column: str, value: Any, persisted: Any) -> bool:
        if column in self.currency_columns:
            return format_text_to_currency(_normalize(value)) == format_text_to_currency(_normalize(persisted))
        return _normalize(value) == _normalize(persisted)

    def _cancel_task(self, key: CellKey) -> None:
        task = self._tasks.pop(key, None)
        if task and not task.done() and task is not asyncio.current_task():
            task.cancel()

    def _task_done(self, task: asyncio.Task) -> None:
        self._running.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Autosave em segundo plano falhou: {error}", exc_info=error)

    async def _delayed_flush(self, key: CellKey) -> None:
        await asyncio.sleep(self.delay)
        # Timer expirou: nova tecla agenda outro timer sem cancelar esta gravação
        if self._tasks.get(key) is asyncio.current_task():
            del self._tasks[key]
        await self.flush(*key)
