# app/api/about/content.py
"""소개 페이지 및 식별 화면에 표시되는 정적 콘텐츠 (영어 / 힌디어)."""

DEFAULT_LANGUAGE = 'en'

ABOUT_CONTENT = {
    'en': {
        'title': "About Our AI-Powered Solution",
        'subtitle': "Revolutionizing livestock management through advanced computer vision",
        'description': (
            "Our cutting-edge AI system uses deep learning algorithms trained specifically on Indian cattle "
            "and buffalo breeds. By analyzing key physical characteristics, coat patterns, and morphological "
            "features, we provide farmers with instant, accurate breed identification to support better "
            "breeding decisions and livestock management."
        ),
        'features': [
            {'icon': "Brain", 'title': "Advanced AI Technology",
             'description': "Deep learning models trained on thousands of breed images"},
            {'icon': "Target", 'title': "High Accuracy",
             'description': "95%+ accuracy rate across 50+ supported Indian breeds"},
            {'icon': "Smartphone", 'title': "Mobile-First Design",
             'description': "Optimized for smartphones with offline capabilities"},
            {'icon': "Users", 'title': "Farmer-Centric",
             'description': "Built specifically for Indian agricultural communities"},
        ],
    },
    'hi': {
        'title': "हमारे एआई-संचालित समाधान के बारे में",
        'subtitle': "उन्नत कंप्यूटर विज़न के माध्यम से पशुधन प्रबंधन में क्रांति",
        'description': (
            "हमारी अत्याधुनिक एआई प्रणाली भारतीय गाय और भैंस की नस्लों पर विशेष रूप से प्रशिक्षित गहरी शिक्षा "
            "एल्गोरिदम का उपयोग करती है। मुख्य भौतिक विशेषताओं, कोट पैटर्न और आकारिक विशेषताओं का विश्लेषण करके, "
            "हम किसानों को बेहतर प्रजनन निर्णय और पशुधन प्रबंधन का समर्थन करने के लिए तत्काल, सटीक नस्ल पहचान "
            "प्रदान करते हैं।"
        ),
        'features': [
            {'icon': "Brain", 'title': "उन्नत एआई तकनीक",
             'description': "हजारों नस्ल छवियों पर प्रशिक्षित गहरी शिक्षा मॉडल"},
            {'icon': "Target", 'title': "उच्च सटीकता",
             'description': "50+ समर्थित भारतीय नस्लों में 95%+ सटीकता दर"},
            {'icon': "Smartphone", 'title': "मोबाइल-फर्स्ट डिज़ाइन",
             'description': "ऑफलाइन क्षमताओं के साथ स्मार्टफोन के लिए अनुकूलित"},
            {'icon': "Users", 'title': "किसान-केंद्रित",
             'description': "भारतीय कृषि समुदायों के लिए विशेष रूप से निर्मित"},
        ],
    },
}

# 식별 화면 하단의 기술 소개 카드
TECHNOLOGY_FEATURES = [
    {'icon': "Brain", 'title': "GPT-4o Vision",
     'description': "Advanced multimodal AI model with superior image understanding capabilities"},
    {'icon': "Target", 'title': "Expert Analysis",
     'description': "Professional-grade breed identification with detailed characteristics analysis"},
    {'icon': "Zap", 'title': "Real-time Processing",
     'description': "Fast AI-powered analysis with comprehensive breed information"},
    {'icon': "Database", 'title': "Comprehensive Knowledge",
     'description': "Trained on extensive livestock datasets covering global cattle and buffalo breeds"},
]


def get_about_content(language: str) -> dict:
    """요청 언어의 콘텐츠를 반환합니다. 지원하지 않는 언어는 영어로 대체합니다."""
    resolved = language if language in ABOUT_CONTENT else DEFAULT_LANGUAGE
    return {'language': resolved, **ABOUT_CONTENT[resolved]}
