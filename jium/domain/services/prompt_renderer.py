"""Meta-instruction renderer - the deterministic half of prompt synthesis."""

import json
from collections.abc import Mapping

from jium.domain.entities.conversation import TemplateDefinition

META_INSTRUCTION = """너는 사용자의 요구를 최고의 결과물로 바꿔 주는 프롬프트 엔지니어야.
아래 정보를 바탕으로, 생성형 AI에게 그대로 전달할 최적화된 프롬프트 하나를 작성해줘.

[템플릿 종류]
{template_type}

[사용자 입력]
{inputs_json}

[작성 요청]
{brief}

[작성 규칙]
- 반드시 {language}로 작성해.
- 입력 항목의 키 이름을 나열하지 말고, 입력값을 자연스러운 문장 속에 녹여 써.
- 제목, 목록, 마크다운 같은 구조적 표기를 쓰지 마.
- 결과물의 형태: {shape}.
- 같은 내용을 반복하지 말고, 설명이나 인사말 없이 결과물만 출력해."""


def serialize_inputs(inputs: Mapping[str, str]) -> str:
    """Inputs as an ordered JSON object (insertion order preserved)."""
    return json.dumps(dict(inputs), ensure_ascii=False, indent=2)


def build_meta_instruction(
    definition: TemplateDefinition,
    inputs: Mapping[str, str],
    language: str = "한국어",
) -> str:
    """Render the instruction sent to the generation backend.

    Same definition, inputs and language always give the same text.
    """
    return META_INSTRUCTION.format(
        template_type=definition.template_type,
        inputs_json=serialize_inputs(inputs),
        brief=definition.render(inputs),
        language=language,
        shape=definition.shape,
    )
