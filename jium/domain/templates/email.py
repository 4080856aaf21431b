"""Email template."""

from collections.abc import Mapping
from functools import partial

from jium.domain.entities.conversation import ConversationStep, TemplateDefinition
from jium.domain.services.field_validator import DEFAULT_SKIP_VALUES, FieldRule, ValidationSchema
from jium.domain.templates.base import generate_button, provided, replies


def render(inputs: Mapping[str, str], skip_values: tuple[str, ...] = DEFAULT_SKIP_VALUES) -> str:
    recipient = provided(inputs, "recipient", skip_values) or "받는 사람"
    brief = (
        f"{recipient}에게 보낼 이메일을 작성해야 해. "
        f"이메일의 목적은 '{provided(inputs, 'purpose', skip_values) or '요청한 용건'}'이고, "
        f"반드시 전달할 내용은 '{provided(inputs, 'keyPoints', skip_values) or '핵심 용건'}'이야. "
        f"'{provided(inputs, 'tone', skip_values) or '정중한'}' 어조로, 제목 한 줄과 본문을 갖춘 이메일이 되게 해줘."
    )
    if sender := provided(inputs, "sender", skip_values):
        brief += f" 보내는 사람 이름은 '{sender}'로 서명해줘."
    return brief


SCHEMA = ValidationSchema(
    template_type="email",
    rules=(
        FieldRule("recipient", min_length=2, message="받는 사람을 2자 이상 입력해 주세요.", missing_message="받는 사람을 입력해 주세요."),
        FieldRule("purpose", min_length=5, message="목적을 5자 이상 입력해 주세요.", missing_message="이메일의 목적을 입력해 주세요."),
        FieldRule("keyPoints", min_length=5, message="핵심 내용을 5자 이상 입력해 주세요.", missing_message="핵심 내용을 입력해 주세요."),
        FieldRule("tone", min_length=2, message="어조를 2자 이상 입력해 주세요.", missing_message="어조를 입력해 주세요."),
        FieldRule("sender", required=False),
    ),
)


DEFINITION = TemplateDefinition(
    template_type="email",
    label="이메일 작성",
    keywords=("이메일", "메일"),
    description="목적과 받는 사람에 맞춘 업무용 이메일",
    shape="제목과 본문을 갖춘 이메일을 만들기 위한 하나의 완결된 지시문",
    render=partial(render, skip_values=SCHEMA.skip_values),
    steps=(
        ConversationStep(
            question="누구에게 보내는 이메일인가요?",
            field_key="recipient",
            suggestions=replies("상사", "고객", "동료", "교수님"),
            min_length=2,
        ),
        ConversationStep(
            question="이메일을 보내는 목적이 무엇인가요?",
            field_key="purpose",
            min_length=5,
            reprompt="목적을 조금 더 구체적으로 알려주세요. 예: '다음 주 회의 일정 변경 요청'",
            elaboration="어떤 상황에서 무엇을 부탁하거나 알리려는지 한 문장으로 적어 주시면 좋아요.",
        ),
        ConversationStep(
            question="꼭 전달해야 할 핵심 내용을 적어 주세요.",
            field_key="keyPoints",
            min_length=5,
            reprompt="핵심 내용을 조금 더 자세히 적어 주세요.",
        ),
        ConversationStep(
            question="어떤 어조로 쓸까요?",
            field_key="tone",
            suggestions=replies("정중하게", "간결하게", "따뜻하게"),
            min_length=2,
        ),
        ConversationStep(
            question='서명에 넣을 이름이 있나요? (없으면 "없음"이라고 입력)',
            field_key="sender",
            suggestions=replies("없음"),
        ),
        ConversationStep(
            question="이메일에 필요한 내용이 모두 모였어요! 아래 버튼을 눌러 생성해 보세요.",
            suggestions=(generate_button("✉️ 이메일 생성하기"),),
            terminal=True,
        ),
    ),
)
