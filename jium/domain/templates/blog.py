"""Blog draft template."""

from collections.abc import Mapping
from functools import partial

from jium.domain.entities.conversation import ConversationStep, TemplateDefinition
from jium.domain.services.field_validator import DEFAULT_SKIP_VALUES, FieldRule, ValidationSchema
from jium.domain.templates.base import generate_button, provided, replies, with_object_particle


def render(inputs: Mapping[str, str], skip_values: tuple[str, ...] = DEFAULT_SKIP_VALUES) -> str:
    audience = provided(inputs, "targetAudience", skip_values) or "독자"
    topic = provided(inputs, "topic", skip_values) or "요청한 주제"
    tone = provided(inputs, "tone", skip_values) or "전문적인"
    lines = [
        "### 역할(Role)",
        f"너는 {with_object_particle(audience)} 위한 IT 콘텐츠 크리에이터이자, 복잡한 기술을 아주 쉽게 설명해주는 전문가야.",
        "",
        "### 맥락(Context)",
        f"'{topic}'에 대한 블로그 글을 작성하려고 해. "
        "독자들이 이 글을 통해 유용한 정보를 얻고, 자신감을 얻게 하는 것이 목표야.",
        "",
        "### 지시(Instruction)",
        "위 맥락에 맞춰, 블로그 글의 초안을 작성해줘.",
        "",
        "### 제약(Constraints)",
        "- 전체 글자 수는 600자 내외로 작성해줘.",
        f"- '{tone}' 톤앤매너를 사용해줘.",
    ]
    if constraints := provided(inputs, "constraints", skip_values):
        lines.append(f"- 그리고 다음 제약사항을 반드시 지켜줘: {constraints}")
    return "\n".join(lines)


SCHEMA = ValidationSchema(
    template_type="blog",
    rules=(
        FieldRule("topic", min_length=2, message="주제를 2자 이상 입력해 주세요.", missing_message="주제를 입력해 주세요."),
        FieldRule("targetAudience", min_length=2, message="독자를 2자 이상 입력해 주세요.", missing_message="독자를 입력해 주세요."),
        FieldRule("tone", min_length=2, message="톤을 2자 이상 입력해 주세요.", missing_message="톤을 입력해 주세요."),
        FieldRule("constraints", required=False, min_length=5, message='제약사항을 5자 이상 입력하거나 "없음"이라고 입력해 주세요.'),
    ),
)


DEFINITION = TemplateDefinition(
    template_type="blog",
    label="블로그 글쓰기",
    keywords=("블로그",),
    description="주제와 독자에 맞춘 600자 내외의 블로그 초안",
    shape="600자 내외의 블로그 초안을 만들기 위한 하나의 완결된 지시문",
    render=partial(render, skip_values=SCHEMA.skip_values),
    steps=(
        ConversationStep(
            question="어떤 주제에 대해 글을 쓸까요?",
            field_key="topic",
            min_length=4,
            reprompt="주제를 조금 더 구체적으로 알려주세요. 예: 'AI 윤리와 대학생의 과제'",
            elaboration="조금만 더 자세히 적어 주시면 훨씬 좋은 글이 나와요. 어떤 관점이나 사례를 다루고 싶으신가요?",
        ),
        ConversationStep(
            question="글을 읽는 독자는 누구인가요?",
            field_key="targetAudience",
            suggestions=replies("대학생", "직장인", "개발자"),
            min_length=2,
        ),
        ConversationStep(
            question="어떤 톤으로 글을 쓸까요?",
            field_key="tone",
            suggestions=replies("친근하게", "전문적으로", "유머있게"),
            min_length=2,
        ),
        ConversationStep(
            question='글에 꼭 포함되어야 할 내용이 있나요? (없으면 "없음"이라고 입력)',
            field_key="constraints",
            min_length=5,
            reprompt='포함할 내용을 조금 더 자세히 적어 주세요. 없다면 "없음"이라고 입력해 주세요.',
        ),
        ConversationStep(
            question="모든 준비가 끝났어요! 아래 버튼을 눌러 글을 생성해 보세요.",
            suggestions=(generate_button(),),
            terminal=True,
        ),
    ),
)
