import re

from ariabrowser.ariatree.compress import CompressionConfig, SnapshotCompressor, Transformation


SNAPSHOT = """\
- navigation [ref=E1]:
  - list [ref=E2]:
    - listitem [ref=E3]:
      - link "Home" [ref=E4] [cursor=pointer]:
        - /url: https://example.com/
    - listitem [ref=E5]:
      - link "Home" [ref=E6] [cursor=pointer]:
        - /url: https://example.com/index
- heading "Welcome" [level=1] [ref=E7]
- text: Hello world"""


def test_default_compression() -> None:
    compressed = SnapshotCompressor().compress(SNAPSHOT)

    assert compressed == "\n".join(
        [
            "navigation [ref=E1]:",
            "list [ref=E2]:",
            "li [ref=E3]:",
            'a "Home" [ref=E4] [cursor=pointer]:',
            "li [ref=E5]:",
            "a [same as above] [ref=E6] [cursor=pointer]:",
            'h1 "Welcome" [ref=E7]',
            '"Hello world"',
        ]
    )


def test_metrics() -> None:
    result = SnapshotCompressor().compress_with_metrics(SNAPSHOT)

    assert result.original_size == len(SNAPSHOT)
    assert result.compressed_size == len(result.compressed)
    assert 0 < result.compression_ratio < 1
    assert result.stats.lines_removed == 2
    assert result.stats.duplicates_removed == 1
    assert result.stats.transformations_applied == 4


def test_non_consecutive_repeats_are_kept() -> None:
    compressed = SnapshotCompressor().compress('- link "Alpha"\n- link "Beta"\n- link "Alpha"')

    assert compressed == 'a "Alpha"\na "Beta"\na "Alpha"'


def test_empty_lines_and_input() -> None:
    compressor = SnapshotCompressor()

    assert compressor.compress('- button "A"\n\n- button "B"') == 'button "A"\nbutton "B"'
    assert compressor.compress("") == ""
    assert compressor.compress_with_metrics("").compression_ratio == 0


def test_deduplication_can_be_disabled() -> None:
    compressor = SnapshotCompressor(CompressionConfig(enable_deduplication=False))

    assert compressor.compress('- link "Same"\n- link "Same"') == 'a "Same"\na "Same"'


def test_custom_configuration() -> None:
    compressor = SnapshotCompressor(
        CompressionConfig(
            transformations=[Transformation(pattern=re.compile(r"^button"), replacement="btn")],
            filtered_prefixes=["/custom:"],
        )
    )

    assert compressor.compress('- button "Go"\n/custom: data\n- link "x"') == 'btn "Go"\nlink "x"'


def test_runtime_additions() -> None:
    compressor = SnapshotCompressor()
    compressor.add_transformation(re.compile(r"^navigation"), "nav")
    compressor.add_filtered_prefix("/extra:")

    assert compressor.compress('- navigation "Main"\n/extra: something') == 'nav "Main"'

    config = compressor.get_config()
    assert len(config.transformations) == 5
    assert config.filtered_prefixes == ["/url:", "/extra:"]
    assert config.enable_deduplication


def test_default_config() -> None:
    config = SnapshotCompressor().get_config()

    assert len(config.transformations) == 4
    assert config.filtered_prefixes == ["/url:"]
    assert config.enable_deduplication
