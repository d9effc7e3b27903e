import re

from pydantic import BaseModel, Field


class Transformation(BaseModel):
    pattern: re.Pattern[str]
    replacement: str


class CompressionStats(BaseModel):
    lines_removed: int
    transformations_applied: int
    duplicates_removed: int


class CompressionResult(BaseModel):
    compressed: str
    original_size: int
    compressed_size: int
    compression_ratio: float
    stats: CompressionStats


def default_transformations() -> list[Transformation]:
    return [
        Transformation(pattern=re.compile(r"^listitem"), replacement="li"),
        Transformation(pattern=re.compile(r"^link"), replacement="a"),
        Transformation(pattern=re.compile(r"^text: (.*?)$"), replacement=r'"\1"'),
        Transformation(
            pattern=re.compile(r'^heading "([^"]+)" \[level=(\d+)\]'), replacement=r'h\2 "\1"'
        ),
    ]


class CompressionConfig(BaseModel):
    transformations: list[Transformation] = Field(default_factory=default_transformations)
    filtered_prefixes: list[str] = Field(default_factory=lambda: ["/url:"])
    enable_deduplication: bool = True


_QUOTED = re.compile(r'^([^"]*)"([^"]+)"(.*)$')


class SnapshotCompressor:
    """
    Shrinks snapshot text before it is put in a prompt: drops list dashes and indentation,
    filters link targets, abbreviates common roles and collapses a quoted text that repeats the
    previous line's. Ref and cursor markers are left untouched.
    """

    def __init__(self, config: CompressionConfig | None = None) -> None:
        config = config or CompressionConfig()
        self._transformations = list(config.transformations)
        self._filtered_prefixes = list(config.filtered_prefixes)
        self._enable_deduplication = config.enable_deduplication

    def compress(self, snapshot: str) -> str:
        return self.compress_with_metrics(snapshot).compressed

    def compress_with_metrics(self, snapshot: str) -> CompressionResult:
        lines = snapshot.split("\n")

        processed = [re.sub(r"^- ", "", line.strip(), count=1) for line in lines]
        processed = [line for line in processed if not self._should_filter(line)]
        lines_removed = len(lines) - len(processed)

        processed = [self._apply_transformations(line) for line in processed]
        processed = [line for line in processed if line]

        duplicates_removed = 0
        if self._enable_deduplication:
            processed, duplicates_removed = self._deduplicate(processed)

        compressed = "\n".join(processed)
        original_size = len(snapshot)
        return CompressionResult(
            compressed=compressed,
            original_size=original_size,
            compressed_size=len(compressed),
            compression_ratio=1 - len(compressed) / original_size if original_size else 0,
            stats=CompressionStats(
                lines_removed=lines_removed,
                transformations_applied=len(self._transformations),
                duplicates_removed=duplicates_removed,
            ),
        )

    def _should_filter(self, line: str) -> bool:
        return any(line.startswith(prefix) for prefix in self._filtered_prefixes)

    def _apply_transformations(self, line: str) -> str:
        for transformation in self._transformations:
            line = transformation.pattern.sub(transformation.replacement, line)
        return line

    @staticmethod
    def _deduplicate(lines: list[str]) -> tuple[list[str], int]:
        last_quoted = ""
        duplicates = 0
        result = []
        for line in lines:
            match = _QUOTED.match(line)
            if match is None:
                result.append(line)
                continue
            prefix, quoted, suffix = match.groups()
            if quoted == last_quoted:
                duplicates += 1
                result.append(f"{prefix}[same as above]{suffix}")
                continue
            last_quoted = quoted
            result.append(line)
        return result, duplicates

    def add_transformation(self, pattern: re.Pattern[str], replacement: str) -> None:
        self._transformations.append(Transformation(pattern=pattern, replacement=replacement))

    def add_filtered_prefix(self, prefix: str) -> None:
        self._filtered_prefixes.append(prefix)

    def get_config(self) -> CompressionConfig:
        return CompressionConfig(
            transformations=list(self._transformations),
            filtered_prefixes=list(self._filtered_prefixes),
            enable_deduplication=self._enable_deduplication,
        )
