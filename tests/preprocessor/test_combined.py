import logging
import re

import pytest

from glslcombine.preprocessor import (
    MalformedMacroError,
    PreprocessorError,
    preprocess_combined,
)
from glslcombine.settings import PreprocessorSettings
from glslcombine.types import (
    ComponentType,
    PipelineStage,
    PrimitiveTopology,
    VertexAttribute,
)

LINE_DIRECTIVE_RE = re.compile(r"^#line (\d+) (\d+)$", re.MULTILINE)


def test_minimal_vertex_fragment(tmp_path):
    source = "#version 450\n#pragma stages(vertex, fragment)\nvoid main() {}\n"

    stages, shaders = preprocess_combined(source, tmp_path / "a.glsl")

    assert stages == PipelineStage.VERTEX | PipelineStage.FRAGMENT
    assert shaders.vertex == (
        "#version 450\n#define _VERTEX_\n#line 0 0\n#line 3 0\nvoid main() {}\n"
    )
    assert shaders.fragment == shaders.vertex.replace("_VERTEX_", "_FRAGMENT_")
    assert shaders.geometry is None
    assert shaders.tess_control is None
    assert shaders.tess_eval is None
    assert shaders.compute is None
    assert shaders.diagnostics.items == []


def test_include_and_line_directive(write_shader):
    root = write_shader(
        "a.glsl",
        '#version 330\n#pragma stages(vertex)\n#include "b.glsl"\nvoid main(){}\n',
    )
    inc = write_shader("b.glsl", "float helper(){return 1.0;}\n")

    stages, shaders = preprocess_combined(root.read_text(), root)

    assert shaders.source_map.paths() == [root, inc]
    assert shaders.vertex.endswith(
        "#line 0 0\n"
        "#line 1 1\nfloat helper(){return 1.0;}\n"
        "#line 4 0\nvoid main(){}\n"
    )


def test_input_layout_and_topology(tmp_path):
    source = (
        "#version 450\n"
        "#pragma stages(vertex, fragment)\n"
        "#pragma input_layout(rgba32f, 0, 0, rg16_snorm, 1, 16)\n"
        "#pragma primitive_topology(line)\n"
    )

    _, shaders = preprocess_combined(source, tmp_path / "a.glsl")

    assert shaders.input_layout == (
        VertexAttribute(ComponentType.FLOAT, 4, False, 0, 0),
        VertexAttribute(ComponentType.SHORT, 2, True, 1, 16),
    )
    assert shaders.primitive_topology is PrimitiveTopology.LINES


def test_duplicate_topology(tmp_path):
    source = (
        "#pragma primitive_topology(triangle)\n"
        "#pragma primitive_topology(triangle)\n"
    )

    _, shaders = preprocess_combined(source, tmp_path / "a.glsl")

    assert shaders.primitive_topology is PrimitiveTopology.TRIANGLES
    assert shaders.diagnostics.error_count >= 1


def test_version_mismatch_uses_latest(write_shader):
    root = write_shader(
        "a.glsl", '#version 330\n#pragma stages(vertex)\n#include "inc.glsl"\n'
    )
    write_shader("inc.glsl", "#version 450\n")

    _, shaders = preprocess_combined(root.read_text(), root)

    assert shaders.vertex.startswith("#version 450\n")
    assert shaders.diagnostics.warning_count >= 1


def test_missing_version_defaults_to_330(tmp_path):
    _, shaders = preprocess_combined(
        "#pragma stages(vertex, compute)\nvoid main(){}\n", tmp_path / "a.glsl"
    )

    assert shaders.vertex.startswith("#version 330\n#define _VERTEX_\n")
    assert shaders.compute.startswith("#version 330\n#define _COMPUTE_\n")
    assert shaders.diagnostics.warning_count == 1
    assert shaders.diagnostics.error_count == 0


def test_default_version_is_configurable(tmp_path):
    _, shaders = preprocess_combined(
        "#pragma stages(vertex)\n",
        tmp_path / "a.glsl",
        settings=PreprocessorSettings(default_version=460),
    )

    assert shaders.vertex.startswith("#version 460\n")


def test_malformed_macro_is_fatal(tmp_path):
    with pytest.raises(MalformedMacroError) as info:
        preprocess_combined(
            "#pragma stages(vertex)\n", tmp_path / "a.glsl", macros=["1bad"]
        )

    assert isinstance(info.value, PreprocessorError)
    assert isinstance(info.value, ValueError)
    assert info.value.macro == "1bad"


def test_macros_are_defined_in_every_variant(tmp_path):
    _, shaders = preprocess_combined(
        "#version 450\n#pragma stages(vertex, fragment)\n",
        tmp_path / "a.glsl",
        macros=["USE_FOG", "LIGHTS=4"],
    )

    for text in (shaders.vertex, shaders.fragment):
        assert text.startswith("#version 450\n#define USE_FOG\n#define LIGHTS 4\n")


def test_whitespace_and_comments_only(tmp_path):
    source = "// just a comment\n\n    \n/* another */\n"

    stages, shaders = preprocess_combined(source, tmp_path / "a.glsl")

    assert stages == PipelineStage(0)
    assert shaders.input_layout is None
    assert shaders.primitive_topology is None
    assert list(shaders.variants()) == []
    for stage in PipelineStage:
        assert shaders.get(stage) is None


def test_variant_count_matches_stage_mask(tmp_path):
    source = "#version 450\n#pragma stages(vertex, geometry, tess_eval)\n"

    stages, shaders = preprocess_combined(source, tmp_path / "a.glsl")

    assert len(list(stages)) == 3
    assert [stage for stage, _ in shaders.variants()] == [
        PipelineStage.VERTEX,
        PipelineStage.GEOMETRY,
        PipelineStage.TESS_EVAL,
    ]


def test_line_directives_only_reference_source_map(write_shader):
    root = write_shader(
        "a.glsl",
        '#version 450\n#pragma stages(fragment)\n#include "b.glsl"\nvoid main(){}\n',
    )
    write_shader("b.glsl", '#include "c.glsl"\nfloat b;\n')
    write_shader("c.glsl", "float c;\n")

    _, shaders = preprocess_combined(root.read_text(), root)

    file_ids = [int(f) for _, f in LINE_DIRECTIVE_RE.findall(shaders.fragment)]
    assert file_ids
    assert all(0 <= f < len(shaders.source_map) for f in file_ids)


def test_preprocessing_is_deterministic(write_shader):
    root = write_shader(
        "a.glsl",
        '#version 450\n#pragma stages(vertex, fragment)\n#include "b.glsl"\nx\n',
    )
    write_shader("b.glsl", "#pragma input_layout(rgb32f, 0, 0)\ny\n")

    first = preprocess_combined(root.read_text(), root, ["A=1"])
    second = preprocess_combined(root.read_text(), root, ["A=1"])

    assert first[0] == second[0]
    for stage in PipelineStage:
        assert first[1].get(stage) == second[1].get(stage)


def test_include_paths_argument_is_used(write_shader, tmp_path):
    root = write_shader("src/a.glsl", '#pragma stages(vertex)\n#include "lib.glsl"\n')
    lib = write_shader("shared/lib.glsl", "float lib;\n")

    _, shaders = preprocess_combined(
        root.read_text(), str(root), include_paths=[str(tmp_path / "shared")]
    )

    assert shaders.source_map.paths()[1] == lib
    assert "float lib;\n" in shaders.vertex


def test_diagnostics_are_logged(tmp_path, caplog):
    with caplog.at_level(logging.DEBUG, logger="glslcombine"):
        preprocess_combined(
            "#pragma stages(vertex, pixel)\n#pragma once\n", tmp_path / "a.glsl"
        )

    errors = [r for r in caplog.records if r.levelno == logging.ERROR]
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(errors) == 2
    assert len(warnings) == 1
    assert any("PP: enabled stages" in r.getMessage() for r in caplog.records)


def test_macros_may_be_a_generator(tmp_path):
    macros = (m for m in ["A", "B=1"])

    _, shaders = preprocess_combined(
        "#version 450\n#pragma stages(vertex)\n", tmp_path / "a.glsl", macros
    )

    assert shaders.vertex.startswith("#version 450\n#define A\n#define B 1\n")
