"""
Configuração agregada do SerDe (fachada).

Este módulo define `SerDeConfiguration`, construída uma única vez por sessão
de tabela a partir do bag de opções e das listas ordenadas de nomes e tipos
de colunas.

Responsabilidades:
    - Executar todos os resolvers de política
    - Agregar todos os erros de configuração encontrados (falha atômica)
    - Expor o contrato somente-leitura consumido por leitura e escrita
    - Compilar os planos de extração e composição

Invariantes:
    - Nenhuma configuração parcialmente válida é observável
    - Após a construção nenhum atributo muda (sem drift durante a sessão)
    - Seguro para uso concorrente somente-leitura

Limites explícitos:
    - Não lê nem escreve bytes Ion (ver `serde`)
    - Não implementa o percurso de paths (ver `core.paths.matcher`)
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from amazon.ion.core import IonType

from .config.hashing import compute_fingerprint
from .config.loader import load_options
from .config.source import ConfigurationSource, as_source
from .exceptions import ConfigurationError, raise_if_any
from .extraction.composition import CompositionPlan
from .extraction.plan import ExtractionOutcome, ExtractionPlan, build_extraction_plan
from .paths.spec import PathSpec
from .policies._options import IGNORE_MALFORMED_KEY, parse_bool, unrecognized_keys
from .policies.encoding import IonEncoding, resolve_encoding
from .policies.nulls import SerializeNullStrategy, resolve_null_strategy
from .policies.overflow import OverflowPolicy, resolve_overflow_policy
from .policies.path_extraction import PathExtractionPolicy, resolve_path_extraction_policy
from .policies.serialize_as import SerializeAsPolicy, resolve_serialize_as_policy
from .policies.timestamp import resolve_timestamp_offset
from .schema.columns import ColumnSchema
from .schema.types import TableType
from .trace import ResolutionTrace


class SerDeConfiguration:
    """
    Todas as políticas resolvidas de uma tabela.

    Args:
        source: bag de opções (`ConfigurationSource` ou `Mapping[str, Any]`).
        column_names: nomes das colunas, na ordem da tabela.
        column_types: tipos das colunas (`TableType` ou string Hive), mesma ordem.
        session_id: rótulo usado nos eventos da trilha.

    Raises:
        ConfigurationError: qualquer problema de configuração. Quando mais de
            um problema é encontrado, `InvalidSerDeConfigurationError` com
            todos eles em `.errors`.
    """

    _frozen = False

    def __init__(
        self,
        source: Union[ConfigurationSource, Dict[str, Any], None],
        column_names: Sequence[str],
        column_types: Sequence[Union[str, TableType]],
        *,
        session_id: str = "default",
    ) -> None:
        source = as_source(source)
        trace = ResolutionTrace(session_id=session_id)

        # sem schema válido nenhum resolver por coluna pode rodar
        columns = ColumnSchema.from_lists(column_names, column_types)

        errors: List[ConfigurationError] = []

        def attempt(resolver: Callable[..., Any], *args: Any) -> Any:
            try:
                return resolver(*args)
            except ConfigurationError as e:
                errors.append(e)
                return None

        encoding = attempt(resolve_encoding, source)
        null_strategy = attempt(resolve_null_strategy, source)
        timestamp_offset = attempt(resolve_timestamp_offset, source)
        overflow = attempt(resolve_overflow_policy, source, columns)
        serialize_as = attempt(resolve_serialize_as_policy, source, columns)
        path_policy = attempt(resolve_path_extraction_policy, source, columns)
        composition_plan = None
        if path_policy is not None:
            composition_plan = attempt(
                CompositionPlan.build, columns.names, path_policy.paths, path_policy.allow_aliasing
            )
        ignore_malformed = parse_bool(source, IGNORE_MALFORMED_KEY, False, errors)

        raise_if_any(errors)

        self.columns: ColumnSchema = columns
        self.trace: ResolutionTrace = trace
        self._encoding: IonEncoding = encoding
        self._null_strategy: SerializeNullStrategy = null_strategy
        self._timestamp_offset: int = timestamp_offset
        self._overflow: OverflowPolicy = overflow
        self._serialize_as: SerializeAsPolicy = serialize_as
        self._paths: PathExtractionPolicy = path_policy
        self._ignore_malformed: bool = ignore_malformed
        self._extraction_plan: ExtractionPlan = build_extraction_plan(
            columns.names, path_policy.paths, case_sensitive=path_policy.case_sensitive
        )
        self._composition_plan: CompositionPlan = composition_plan

        self._record_resolution(source)
        self._frozen = True

    def __setattr__(self, name: str, value: Any) -> None:
        if self._frozen:
            raise AttributeError(f"SerDeConfiguration is immutable; cannot set {name!r}")
        super().__setattr__(name, value)

    # -----------------------------
    # Construtores alternativos
    # -----------------------------

    @classmethod
    def from_mapping(
        cls,
        options: Optional[Dict[str, Any]],
        column_names: Sequence[str],
        column_types: Sequence[Union[str, TableType]],
        **kwargs: Any,
    ) -> "SerDeConfiguration":
        return cls(as_source(options), column_names, column_types, **kwargs)

    @classmethod
    def from_files(
        cls,
        defaults_path: str,
        column_names: Sequence[str],
        column_types: Sequence[Union[str, TableType]],
        local_path: Optional[str] = None,
        **kwargs: Any,
    ) -> "SerDeConfiguration":
        source = load_options(defaults_path=defaults_path, local_path=local_path)
        return cls(source, column_names, column_types, **kwargs)

    # -----------------------------
    # Trilha
    # -----------------------------

    def _record_resolution(self, source: ConfigurationSource) -> None:
        self.trace.log(component="encoding", level="info", message="policy resolved", value=self._encoding.value)
        self.trace.log(
            component="serialize_null", level="info", message="policy resolved", value=self._null_strategy.value
        )
        self.trace.log(
            component="timestamp_offset", level="info", message="policy resolved", value=self._timestamp_offset
        )
        self.trace.log(
            component="overflow", level="info", message="policy resolved", **self._overflow.to_dict()
        )
        for index in sorted(self._serialize_as.overridden):
            self.trace.log(
                component="serialize_as",
                level="info",
                message="override applied",
                column=self.columns[index].name,
                ion_type=self._serialize_as.serialization_ion_type_for(index).name,
            )
        for index in sorted(self._paths.explicit):
            self.trace.log(
                component="path_extraction",
                level="info",
                message="path bound",
                column=self.columns[index].name,
                path=self._paths.path_for(index).render(),
            )
        for group in self._paths.aliases():
            self.trace.log(
                component="path_extraction",
                level="info",
                message="aliased columns share one path",
                columns=[self.columns[i].name for i in group],
            )
        for index in self._composition_plan.fallbacks:
            name = self.columns[index].name
            self.trace.add_warning(
                component="composition",
                message=(
                    f"path {self._paths.path_for(index).render()} of column '{name}' cannot be "
                    f"inverted; writes use field '{name}'"
                ),
            )
        for key in unrecognized_keys(source):
            self.trace.add_warning(component="options", message=f"ignored unrecognised option {key}")

    # -----------------------------
    # Contrato somente-leitura
    # -----------------------------

    @property
    def encoding(self) -> IonEncoding:
        return self._encoding

    @property
    def timestamp_offset_minutes(self) -> int:
        return self._timestamp_offset

    @property
    def serialize_null(self) -> SerializeNullStrategy:
        return self._null_strategy

    @property
    def ignore_malformed(self) -> bool:
        return self._ignore_malformed

    @property
    def extraction_plan(self) -> ExtractionPlan:
        return self._extraction_plan

    @property
    def composition_plan(self) -> CompositionPlan:
        return self._composition_plan

    @property
    def allow_aliasing(self) -> bool:
        return self._paths.allow_aliasing

    def fail_on_overflow_for(self, column_name: str) -> bool:
        return self._overflow.fail_on_overflow_for(column_name)

    def serialization_ion_type_for(self, index: int) -> IonType:
        return self._serialize_as.serialization_ion_type_for(index)

    def path_for(self, index: int) -> PathSpec:
        return self._paths.path_for(index)

    def build_extraction_plan(self, root: Any) -> ExtractionOutcome:
        """Avalia o plano de extração da tabela sobre um documento de topo."""
        return self._extraction_plan.evaluate(root)

    def to_dict(self) -> Dict[str, Any]:
        """Snapshot serializável das políticas efetivas."""
        return {
            "columns": [{"name": c.name, "type": c.table_type.type_name()} for c in self.columns],
            "encoding": self._encoding.value,
            "serialize_null": self._null_strategy.value,
            "timestamp_offset_minutes": self._timestamp_offset,
            "ignore_malformed": self._ignore_malformed,
            "overflow": self._overflow.to_dict(),
            "serialize_as": self._serialize_as.to_dict(),
            "path_extraction": self._paths.to_dict(),
        }

    def fingerprint(self) -> str:
        return compute_fingerprint(self.to_dict())

    def __repr__(self) -> str:
        return f"SerDeConfiguration({self.columns!r}, encoding={self._encoding.value})"
