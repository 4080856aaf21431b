"""SNS promotional copy template."""

from collections.abc import Mapping
from functools import partial

from jium.domain.entities.conversation import ConversationStep, TemplateDefinition
from jium.domain.services.field_validator import DEFAULT_SKIP_VALUES, FieldRule, ValidationSchema
from jium.domain.templates.base import generate_button, provided, replies


def render(inputs: Mapping[str, str], skip_values: tuple[str, ...] = DEFAULT_SKIP_VALUES) -> str:
    brief = (
        f"{provided(inputs, 'platform', skip_values) or 'SNS'}에 올릴 "
        f"'{provided(inputs, 'product', skip_values) or '제품'}' 홍보 문구를 써야 해. "
        f"가장 강조할 점은 '{provided(inputs, 'highlight', skip_values) or '제품의 장점'}'이야. "
        "첫 문장에서 시선을 끌고, 마지막 문장은 행동을 유도하도록 해줘."
    )
    if hashtags := provided(inputs, "hashtags", skip_values):
        brief += f" 다음 해시태그를 자연스럽게 포함해줘: {hashtags}"
    return brief


SCHEMA = ValidationSchema(
    template_type="sns",
    rules=(
        FieldRule("product", min_length=2, message="홍보 대상을 2자 이상 입력해 주세요.", missing_message="홍보할 제품이나 서비스를 입력해 주세요."),
        FieldRule("platform", min_length=2, message="플랫폼을 2자 이상 입력해 주세요.", missing_message="플랫폼을 입력해 주세요."),
        FieldRule("highlight", min_length=5, message="강조할 점을 5자 이상 입력해 주세요.", missing_message="강조할 점을 입력해 주세요."),
        FieldRule("hashtags", required=False),
    ),
)


DEFINITION = TemplateDefinition(
    template_type="sns",
    label="SNS 홍보 문구",
    keywords=("SNS", "홍보"),
    description="플랫폼에 맞춘 짧은 홍보 문구",
    shape="2~3문장 분량의 홍보 문구를 만들기 위한 하나의 완결된 지시문",
    render=partial(render, skip_values=SCHEMA.skip_values),
    steps=(
        ConversationStep(
            question="어떤 제품이나 서비스를 홍보할까요?",
            field_key="product",
            min_length=2,
            reprompt="홍보할 대상을 조금 더 구체적으로 알려주세요.",
        ),
        ConversationStep(
            question="어디에 올릴 문구인가요?",
            field_key="platform",
            suggestions=replies("인스타그램", "X(트위터)", "페이스북"),
            min_length=2,
        ),
        ConversationStep(
            question="가장 강조하고 싶은 점은 무엇인가요?",
            field_key="highlight",
            min_length=5,
            reprompt="강조할 점을 조금 더 자세히 적어 주세요. 예: '출시 기념 30% 할인'",
            elaboration="고객이 얻는 이득이나 특별한 점을 한 문장으로 적어 주시면 좋아요.",
        ),
        ConversationStep(
            question='꼭 넣고 싶은 해시태그가 있나요? (없으면 "없음"이라고 입력)',
            field_key="hashtags",
            suggestions=replies("없음"),
        ),
        ConversationStep(
            question="준비가 끝났어요! 아래 버튼을 눌러 홍보 문구를 만들어 보세요.",
            suggestions=(generate_button(),),
            terminal=True,
        ),
    ),
)
