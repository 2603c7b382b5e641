"""
RAG Prompt Templates

근거 기반 답변 생성 프롬프트
"""

from typing import Dict


QA_WITH_CONTEXT = """You are an AI tutor helping students learn. Use the following context to answer the question accurately.

Context:
{context}
{conversation}
Question: {question}

Provide a clear, educational answer based on the context. If the context doesn't contain enough information, say so.

Answer:"""

EXPLAIN_CONCEPT = """You are an expert educator. Based on the following learning materials, explain the concept to the student.

Learning Materials:
{context}
{conversation}
Student Question: {question}

Provide a clear, step-by-step explanation suitable for the student's level. Use examples when helpful.

Explanation:"""

ROADMAP_GUIDANCE = """You are a learning path advisor. Based on the roadmap content, provide guidance to the student.

Roadmap Content:
{context}
{conversation}
Question: {question}

Provide personalized guidance to help the student progress effectively.

Guidance:"""

CONVERSATION_BLOCK = """
Recent conversation:
{history}
"""

TEMPLATES: Dict[str, str] = {
    "qa": QA_WITH_CONTEXT,
    "explain_concept": EXPLAIN_CONCEPT,
    "roadmap_guidance": ROADMAP_GUIDANCE,
}

DEFAULT_TEMPLATE = "qa"


def get_template(name: str) -> str:
    """이름으로 템플릿 조회"""
    if name not in TEMPLATES:
        raise ValueError(
            f"Unknown prompt template: {name}. Available: {list(TEMPLATES.keys())}"
        )
    return TEMPLATES[name]
