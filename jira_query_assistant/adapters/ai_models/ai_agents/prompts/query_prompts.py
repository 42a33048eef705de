from __future__ import annotations

from langchain_core.prompts import ChatPromptTemplate

JQL_SYSTEM_PROMPT = """You are a Jira JQL expert. Given a user request, output ONLY a JQL string, no prose.
Rules:
- Keep it concise and valid for Jira Server 7.12 (JQL 2.x API).
- Prefer fields: project, issuetype, status, assignee, reporter, summary, description, updated, created, priority, resolution, labels, worklogAuthor, worklogDate, timespent.
- When user talks about "мои задачи / я делал / assigned to me" use assignee = currentUser().
- When user asks about tasks they reported ("я создал/завел") use reporter = currentUser().
- For "сколько времени списал я за этот месяц" use: worklogAuthor = currentUser() AND worklogDate >= startOfMonth() AND worklogDate <= endOfMonth().
- If nothing specific is given, search by text: text ~ "user query".
- Do not use functions unavailable in server 7.12 (avoid IN with empty).
- Never include quotes around field names."""

ANALYSIS_SYSTEM_PROMPT = """You are a Jira expert. Given:
- the original user request,
- the JQL that was executed,
- the raw Jira search JSON (issues array with fields),
Produce a concise answer in Russian with:
1) краткое резюме (1-3 предложения),
2) если спрашивали про время/лог worklog - покажи итоговое время (hours) суммарно,
3) перечисли ключи задач с короткими заголовками (5-10 задач максимум),
4) если данных мало, скажи об этом.
Формат: резюме, затем список задач.
Не выдумывай данных, опирайся только на JSON."""

FOLLOW_UP_SYSTEM_PROMPT = """You are a Jira expert helping with a search the user already ran.
You get the original request, the executed JQL, the earlier analysis, the found issues and a
fragment of the raw Jira JSON. Carry out the user's command using only this context.
Answer in the language of the command. If the context does not contain the answer, say so."""


def _escape_braces(text: str) -> str:
    return text.replace("{", "{{").replace("}", "}}")


def jql_prompt() -> ChatPromptTemplate:
    return ChatPromptTemplate.from_messages(
        [
            ("system", _escape_braces(JQL_SYSTEM_PROMPT)),
            ("human", "User request: {query}"),
        ]
    )


def analysis_prompt() -> ChatPromptTemplate:
    return ChatPromptTemplate.from_messages(
        [
            ("system", _escape_braces(ANALYSIS_SYSTEM_PROMPT)),
            ("human", "User request: {query}\nExecuted JQL: {jql}\nJira raw JSON: {raw_json}"),
        ]
    )


def follow_up_prompt() -> ChatPromptTemplate:
    return ChatPromptTemplate.from_messages(
        [
            ("system", _escape_braces(FOLLOW_UP_SYSTEM_PROMPT)),
            ("human", "Context:\n{context}\n\nCommand: {command}"),
        ]
    )
