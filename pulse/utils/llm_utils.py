import google.generativeai as genai
from openai import OpenAI
from pulse.config import Config
from pulse.tools.results import ToolCall, ToolResult
from dataclasses import dataclass
import logging
import json
import re
from typing import List, Dict, Optional, Tuple

# Configure logger
logger = logging.getLogger(__name__)

# Initialize Gemini (if key present)
if Config.GEMINI_API_KEY:
    genai.configure(api_key=Config.GEMINI_API_KEY)


class LLMError(Exception):
    """Raised when the language model provider cannot be reached or rejects the request."""


@dataclass
class ModelReply:
    text: Optional[str] = None
    tool_call: Optional[ToolCall] = None


def generate_text(prompt: str, system_prompt: str = None, provider: str = None,
                  max_output_tokens: int = None, temperature: float = None) -> Optional[str]:
    """
    Single-shot text generation, used by the plan proposer.

    Returns:
        The generated text, or None if the model produced nothing.

    Raises:
        LLMError: the provider call failed.
    """
    reply = generate_chat_response(
        messages=[{"role": "user", "content": prompt}],
        system_prompt=system_prompt,
        provider=provider,
        max_output_tokens=max_output_tokens or Config.PLAN_MAX_OUTPUT_TOKENS,
        temperature=temperature,
    )
    if reply is None or not reply.text:
        return None
    return reply.text


def generate_chat_response(messages: List[Dict[str, str]], system_prompt: str = None, tools: list = None,
                           provider: str = None, tool_exchange: Optional[Tuple[ToolCall, ToolResult]] = None,
                           max_output_tokens: int = None, temperature: float = None) -> Optional[ModelReply]:
    """
    Generate a chat response from the configured LLM provider.

    Args:
        messages (list): Message dictionaries with 'role' ('user'/'assistant') and 'content'.
        system_prompt (str): System instruction for the model.
        tools (list): Optional tool definitions (OpenAI function format).
        provider (str): Optional provider override ('gemini', 'openai', 'local').
        tool_exchange (tuple): Optional (ToolCall, ToolResult) of an executed tool,
            appended after the messages so the model can phrase a confirmation.
        max_output_tokens (int): Output token cap.
        temperature (float): Sampling temperature.

    Returns:
        ModelReply with text and/or a single tool call, or None if the model
        returned no candidate at all.

    Raises:
        LLMError: the provider call failed.
    """
    if not provider:
        provider = Config.LLM_PROVIDER
    if temperature is None:
        temperature = Config.LLM_TEMPERATURE
    if max_output_tokens is None:
        max_output_tokens = Config.CHAT_MAX_OUTPUT_TOKENS

    logger.info(f"Using LLM provider: {provider}")

    if provider == "gemini":
        return _gemini_response(messages, system_prompt, tools, tool_exchange, max_output_tokens, temperature)
    elif provider in ("openai", "local"):
        return _openai_response(messages, system_prompt, tools, tool_exchange, max_output_tokens, temperature, provider)
    raise LLMError(f"Unknown LLM Provider: {provider}")


# --- GEMINI ---
def _gemini_response(messages, system_prompt, tools, tool_exchange, max_output_tokens, temperature):
    if not Config.GEMINI_API_KEY:
        raise LLMError("Gemini API Key missing.")

    gemini_tools = None
    if tools:
        gemini_tools = [{"function_declarations": [t["function"] for t in tools]}]

    contents = []
    for msg in messages:
        if msg["role"] == "system":
            continue
        gemini_role = "user" if msg["role"] == "user" else "model"
        contents.append({"role": gemini_role, "parts": [msg["content"]]})

    if tool_exchange:
        call, result = tool_exchange
        contents.append({"role": "model", "parts": [{"function_call": {"name": call.name, "args": call.args}}]})
        contents.append({"role": "user", "parts": [{
            "function_response": {"name": call.name, "response": {"result": result.message}}
        }]})

    if not contents:
        raise LLMError("No messages provided.")

    try:
        model = genai.GenerativeModel(
            model_name=Config.GEMINI_MODEL,
            system_instruction=system_prompt,
            tools=gemini_tools
        )
        logger.info(f"Sending request to Gemini ({Config.GEMINI_MODEL})...")
        response = model.generate_content(
            contents,
            generation_config=genai.GenerationConfig(
                max_output_tokens=max_output_tokens,
                temperature=temperature
            )
        )
    except Exception as e:
        logger.error(f"Gemini API error: {e}")
        raise LLMError(f"Error communicating with Gemini: {e}") from e

    if not response.candidates:
        logger.warning("Gemini returned no candidates")
        return None

    reply = ModelReply()
    text_chunks = []
    for part in response.candidates[0].content.parts:
        function_call = getattr(part, "function_call", None)
        if function_call and function_call.name and reply.tool_call is None:
            reply.tool_call = ToolCall(
                name=function_call.name,
                args={key: value for key, value in function_call.args.items()}
            )
        elif getattr(part, "text", None):
            text_chunks.append(part.text)
    reply.text = "".join(text_chunks) or None
    return reply


# --- OPENAI / LOCAL (OpenAI-compatible API) ---
def _openai_response(messages, system_prompt, tools, tool_exchange, max_output_tokens, temperature, provider):
    if provider == "local":
        client = OpenAI(base_url=Config.LOCAL_LLM_URL, api_key="sk-no-key-required")
        model_name = Config.LOCAL_LLM_MODEL
    else:
        if not Config.OPENAI_API_KEY:
            raise LLMError("OpenAI API Key missing.")
        client = OpenAI(api_key=Config.OPENAI_API_KEY)
        model_name = Config.OPENAI_MODEL

    openai_messages = []
    if system_prompt:
        openai_messages.append({"role": "system", "content": system_prompt})
    for msg in messages:
        if msg["role"] == "system" and system_prompt:
            continue
        openai_messages.append({"role": msg["role"], "content": msg["content"]})

    if tool_exchange:
        call, result = tool_exchange
        call_id = call.call_id or "call_1"
        openai_messages.append({
            "role": "assistant",
            "content": None,
            "tool_calls": [{
                "id": call_id,
                "type": "function",
                "function": {"name": call.name, "arguments": json.dumps(call.args)}
            }]
        })
        openai_messages.append({
            "role": "tool",
            "tool_call_id": call_id,
            "content": json.dumps({"result": result.message})
        })

    kwargs = {}
    if tools:
        kwargs["tools"] = tools
        kwargs["tool_choice"] = "auto"

    try:
        logger.info(f"Sending request to {provider} ({model_name})...")
        completion = client.chat.completions.create(
            model=model_name,
            messages=openai_messages,
            max_tokens=max_output_tokens,
            temperature=temperature,
            **kwargs
        )
    except Exception as e:
        logger.error(f"{provider} API Error: {e}")
        raise LLMError(f"Error communicating with {provider}: {e}") from e

    if not completion.choices:
        logger.warning(f"{provider} returned no choices")
        return None

    message = completion.choices[0].message
    reply = ModelReply(text=message.content or None)
    if message.tool_calls:
        tc = message.tool_calls[0]
        try:
            args = json.loads(tc.function.arguments or "{}")
        except json.JSONDecodeError:
            logger.warning(f"Unparseable tool arguments from {provider}: {tc.function.arguments}")
            args = {}
        if not isinstance(args, dict):
            logger.warning(f"Tool arguments from {provider} are not an object: {tc.function.arguments}")
            args = {}
        reply.tool_call = ToolCall(name=tc.function.name, args=args, call_id=tc.id)
    elif tools and reply.text and "tool_calls" in reply.text:
        # Local models without native tool support answer with the JSON inline
        reply.tool_call = _parse_text_tool_call(reply.text)
        if reply.tool_call:
            reply.text = None
    return reply


def _parse_text_tool_call(content: str) -> Optional[ToolCall]:
    try:
        json_match = re.search(r'\{.*\}', content, re.DOTALL)
        if not json_match:
            return None
        data = json.loads(json_match.group(0))
        tc = data["tool_calls"][0]
        args = tc["function"]["arguments"]
        if isinstance(args, str):
            args = json.loads(args)
        if not isinstance(args, dict):
            raise TypeError(f"tool arguments must be an object, got {type(args).__name__}")
        return ToolCall(name=tc["function"]["name"], args=args, call_id=tc.get("id", "call_1"))
    except (ValueError, KeyError, IndexError, TypeError) as e:
        logger.warning(f"Failed to parse tool call from local LLM: {e}")
        return None
