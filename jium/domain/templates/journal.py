"""Journal entry template."""

from collections.abc import Mapping
from functools import partial

from jium.domain.entities.conversation import ConversationStep, TemplateDefinition
from jium.domain.services.field_validator import DEFAULT_SKIP_VALUES, FieldRule, ValidationSchema
from jium.domain.templates.base import generate_button, provided, replies


def render(inputs: Mapping[str, str], skip_values: tuple[str, ...] = DEFAULT_SKIP_VALUES) -> str:
    brief = (
        f"오늘 있었던 일은 다음과 같아: {provided(inputs, 'event', skip_values) or '평범한 하루'}. "
        f"그때 느낀 감정은 '{provided(inputs, 'feeling', skip_values) or '담담함'}'이야. "
        "이 내용을 바탕으로 1인칭 시점의 솔직한 일기를 써줘."
    )
    if lesson := provided(inputs, "lesson", skip_values):
        brief += f" 마지막에는 이 일에서 배운 점({lesson})을 담담하게 정리해줘."
    return brief


SCHEMA = ValidationSchema(
    template_type="journal",
    rules=(
        FieldRule("event", min_length=10, message="있었던 일을 10자 이상 입력해 주세요.", missing_message="오늘 있었던 일을 입력해 주세요."),
        FieldRule("feeling", min_length=2, message="감정을 2자 이상 입력해 주세요.", missing_message="느낀 감정을 입력해 주세요."),
        FieldRule("lesson", required=False, min_length=5, message='배운 점을 5자 이상 입력하거나 "없음"이라고 입력해 주세요.'),
    ),
)


DEFINITION = TemplateDefinition(
    template_type="journal",
    label="일기 쓰기",
    keywords=("일기", "저널"),
    description="하루를 돌아보는 1인칭 일기",
    render=partial(render, skip_values=SCHEMA.skip_values),
    steps=(
        ConversationStep(
            question="오늘 어떤 일이 있었나요?",
            field_key="event",
            min_length=10,
            reprompt="어떤 일이 있었는지 조금 더 들려주세요.",
            elaboration="누구와, 어디서, 무엇을 했는지 떠오르는 대로 적어 주세요.",
        ),
        ConversationStep(
            question="그때 어떤 기분이 들었나요?",
            field_key="feeling",
            suggestions=replies("기뻤어요", "뿌듯했어요", "아쉬웠어요", "지쳤어요"),
            min_length=2,
        ),
        ConversationStep(
            question='오늘 배운 점이나 다짐이 있나요? (없으면 "없음"이라고 입력)',
            field_key="lesson",
            min_length=5,
            reprompt='조금 더 자세히 적어 주세요. 없다면 "없음"이라고 입력해 주세요.',
        ),
        ConversationStep(
            question="오늘 하루를 정리할 준비가 됐어요. 아래 버튼을 눌러 일기를 만들어 보세요.",
            suggestions=(generate_button("📔 일기 생성하기"),),
            terminal=True,
        ),
    ),
)
