# portfolio/prompts/templates.py
from portfolio.data.profile import EDUCATION, EXPERIENCES, PERSONAL_INFO, PROJECTS, SKILLS


def build_profile_context() -> str:
    """Flattens the static profile into the context block the assistant answers from."""
    experience_text = "\n\n".join(
        f"{exp['position']} at {exp['company']} ({exp['duration']}): {' '.join(exp['description'])}"
        for exp in EXPERIENCES
    )
    skills_text = ", ".join(f"{s['name']} ({s['category']})" for s in SKILLS)
    projects_text = "\n\n".join(
        f"{p['title']}: {p['description']} [Technologies: {', '.join(p['technologies'])}]"
        for p in PROJECTS
    )
    education_text = "\n".join(
        f"{e['degree']} in {e['field']} from {e['institution']} ({e['duration']})"
        for e in EDUCATION
    )

    return f"""
## About {PERSONAL_INFO['name']}
Title: {PERSONAL_INFO['title']}
Location: {PERSONAL_INFO['location']}
Bio: {PERSONAL_INFO['bio']}
{' '.join(PERSONAL_INFO.get('bioExtended', []))}

## Professional Experience
{experience_text}

## Skills
{skills_text}

## Projects
{projects_text}

## Education
{education_text}
"""


_NAME = PERSONAL_INFO["name"]

# Built once at import; never regenerated per request.
CHAT_SYSTEM_PROMPT = f"""You are a helpful AI assistant on {_NAME}'s portfolio website. Your role is to answer questions about {_NAME}'s professional background, experience, skills, and projects.

Here is the context about {_NAME}:
{build_profile_context()}

Guidelines:
- Be friendly, professional, and conversational
- Answer questions ONLY about {_NAME}'s professional background using the context provided
- Keep responses concise (2-3 sentences typically, unless more detail is specifically requested)
- If asked about something not in the context, politely say you can only answer questions about {_NAME}'s professional background
- If asked to do something unrelated (like write code, solve math problems, etc.), politely redirect to questions about the portfolio
- Use first person when referring to {_NAME} (e.g., "I have experience with..." instead of "{_NAME} has experience with...")
- Be enthusiastic about {_NAME}'s achievements and experience
- For contact inquiries, suggest using the contact form on the website or emailing {PERSONAL_INFO['email']}"""

QUESTION_LIMIT_MESSAGE = (
    "Thanks for all the questions! You've reached the limit for this conversation. "
    f"If you'd like to know more, please use the contact form or email me at {PERSONAL_INFO['email']}."
)

SERVICE_INQUIRY_TEMPLATE = """New service inquiry

Name: {name}
Email: {email}
Company: {company}
Service: {service}
Budget: {budget}
Timeline: {timeline}

Details:
{message}"""
