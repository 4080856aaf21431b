"""Naming proposal template."""

from collections.abc import Mapping
from functools import partial

from jium.domain.entities.conversation import ConversationStep, TemplateDefinition
from jium.domain.services.field_validator import DEFAULT_SKIP_VALUES, FieldRule, ValidationSchema
from jium.domain.templates.base import generate_button, provided, replies


def render(inputs: Mapping[str, str], skip_values: tuple[str, ...] = DEFAULT_SKIP_VALUES) -> str:
    brief = (
        f"새 {provided(inputs, 'subject', skip_values) or '대상'}의 이름 후보를 제안해야 해. "
        f"대상에 대한 설명은 다음과 같아: {provided(inputs, 'description', skip_values) or '설명 없음'}. "
        f"이름은 '{provided(inputs, 'mood', skip_values) or '기억하기 쉬운'}' 느낌을 주어야 하고, "
        "후보 다섯 개와 각 이름을 고른 이유를 함께 설명해줘."
    )
    if avoid := provided(inputs, "avoid", skip_values):
        brief += f" 다음 단어나 느낌은 피해줘: {avoid}"
    return brief


SCHEMA = ValidationSchema(
    template_type="naming",
    rules=(
        FieldRule("subject", min_length=2, message="대상을 2자 이상 입력해 주세요.", missing_message="이름을 지을 대상을 입력해 주세요."),
        FieldRule("description", min_length=10, message="설명을 10자 이상 입력해 주세요.", missing_message="대상에 대한 설명을 입력해 주세요."),
        FieldRule("mood", min_length=2, message="원하는 느낌을 2자 이상 입력해 주세요.", missing_message="원하는 느낌을 입력해 주세요."),
        FieldRule("avoid", required=False),
    ),
)


DEFINITION = TemplateDefinition(
    template_type="naming",
    label="이름 짓기",
    keywords=("이름", "네이밍"),
    description="서비스, 브랜드, 프로젝트의 이름 후보",
    shape="이름 후보 다섯 개와 그 이유를 요청하는 하나의 완결된 지시문",
    render=partial(render, skip_values=SCHEMA.skip_values),
    steps=(
        ConversationStep(
            question="무엇의 이름을 지을까요?",
            field_key="subject",
            suggestions=replies("서비스", "브랜드", "프로젝트", "반려동물"),
            min_length=2,
        ),
        ConversationStep(
            question="어떤 대상인지 간단히 설명해 주세요.",
            field_key="description",
            min_length=10,
            reprompt="설명을 조금 더 자세히 적어 주세요. 무엇을 하는지, 누가 쓰는지 알려주시면 좋아요.",
            elaboration="한두 문장이면 충분해요. 대상의 특징이나 분위기를 적어 주세요.",
        ),
        ConversationStep(
            question="어떤 느낌의 이름이면 좋을까요?",
            field_key="mood",
            suggestions=replies("세련되게", "귀엽게", "믿음직하게"),
            min_length=2,
        ),
        ConversationStep(
            question='피하고 싶은 단어나 느낌이 있나요? (없으면 "없음"이라고 입력)',
            field_key="avoid",
            suggestions=replies("없음"),
        ),
        ConversationStep(
            question="좋아요! 아래 버튼을 눌러 이름 후보를 받아 보세요.",
            suggestions=(generate_button(),),
            terminal=True,
        ),
    ),
)
