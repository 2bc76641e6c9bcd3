# app/services/prompts.py
"""
비전 API에 보내는 프롬프트와 응답 JSON 스키마 정의.

품종 목록은 모델에게 주는 예시일 뿐이며, 모델은 이 목록 밖의 품종도 답할 수 있습니다.
"""

REFERENCE_BREEDS = {
    "indian_cattle": ["Gir", "Sahiwal", "Red Sindhi", "Tharparkar", "Rathi", "Hariana", "Ongole"],
    "international_cattle": ["Holstein Friesian", "Jersey", "Brown Swiss", "Simmental"],
    "buffalo": ["Murrah Buffalo", "Nili-Ravi Buffalo", "Surti Buffalo"],
}

IDENTIFICATION_SYSTEM_PROMPT = f"""You are an expert veterinary specialist and livestock breed identification expert.
Analyze the uploaded image to identify the cattle or buffalo breed with high accuracy.
Consider physical characteristics like body structure, color patterns, facial features,
horn shape, ear size, and other distinguishing features.

Focus on identifying common Indian and international cattle breeds including:
- {", ".join(REFERENCE_BREEDS["indian_cattle"])}
- {", ".join(REFERENCE_BREEDS["international_cattle"])}
- {", ".join(REFERENCE_BREEDS["buffalo"])}

Provide detailed analysis with confidence levels and breed characteristics."""

IDENTIFICATION_USER_PROMPT = (
    "Please identify the cattle or buffalo breed in this image and provide detailed information about it."
)

# 보조 분석(analysis_type)별 시스템 프롬프트. 알 수 없는 타입은 'breed'를 사용합니다.
ANALYSIS_SYSTEM_PROMPTS = {
    "breed": (
        "You are an expert livestock breed identification specialist. Analyze this image to identify "
        "cattle or buffalo breeds with detailed characteristics and confidence levels."
    ),
    "health": (
        "You are a veterinary expert. Analyze this livestock image for visible health indicators, "
        "body condition, and any signs of wellness or concerns."
    ),
    "condition": (
        "You are a livestock condition assessment expert. Evaluate the animal's body condition score, "
        "nutritional status, and overall physical appearance."
    ),
}

DEFAULT_ANALYSIS_TYPE = "breed"

BREED_RESPONSE_SCHEMA = {
    "type": "object",
    "properties": {
        "breedName": {
            "type": "string",
            "description": "The identified breed name",
        },
        "confidence": {
            "type": "number",
            "minimum": 0,
            "maximum": 1,
            "description": "Confidence level between 0 and 1",
        },
        "breedInfo": {
            "type": "object",
            "properties": {
                "origin": {"type": "string", "description": "Geographic origin of the breed"},
                "type": {"type": "string", "description": "Type classification (e.g., Dairy Cattle, Water Buffalo)"},
                "characteristics": {"type": "string", "description": "Physical and behavioral characteristics"},
                "primaryUse": {"type": "string", "description": "Primary use of the breed"},
                "averageWeight": {"type": "string", "description": "Average weight range"},
                "milkYield": {"type": "string", "description": "Average milk yield if applicable"},
            },
            "required": ["origin", "type", "characteristics", "primaryUse"],
            "additionalProperties": False,
        },
        "analysisNotes": {
            "type": "string",
            "description": "Additional analysis notes and reasoning for identification",
        },
        "alternativePossibilities": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "breedName": {"type": "string"},
                    "confidence": {"type": "number", "minimum": 0, "maximum": 1},
                },
                "required": ["breedName", "confidence"],
            },
            "description": "Other possible breed identifications with lower confidence",
        },
    },
    "required": ["breedName", "confidence", "breedInfo", "analysisNotes"],
    "additionalProperties": False,
}

BREED_RESPONSE_FORMAT = {
    "type": "json_schema",
    "json_schema": {
        "name": "breed_identification_response",
        "schema": BREED_RESPONSE_SCHEMA,
    },
}


def analysis_system_prompt(analysis_type: str) -> str:
    return ANALYSIS_SYSTEM_PROMPTS.get(analysis_type, ANALYSIS_SYSTEM_PROMPTS[DEFAULT_ANALYSIS_TYPE])
