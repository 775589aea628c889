from typing import List, Optional

import discord

MAX_MESSAGE_LENGTH = 2000


def chunk_lines(message: str, max_length: int = MAX_MESSAGE_LENGTH) -> List[str]:
    """
    Split a message on line boundaries into chunks no longer than max_length.
    A single line longer than max_length is hard-split.
    """
    chunks = []
    current_chunk = ""

    for line in message.split('\n'):
        while len(line) + 1 > max_length:
            if current_chunk:
                chunks.append(current_chunk)
                current_chunk = ""
            chunks.append(line[:max_length - 1] + '\n')
            line = line[max_length - 1:]

        if len(current_chunk) + len(line) + 1 <= max_length:
            current_chunk += line + '\n'
        else:
            chunks.append(current_chunk)
            current_chunk = line + '\n'

    if current_chunk:
        chunks.append(current_chunk)

    return chunks


async def send_chunked_message(channel: discord.abc.Messageable, message: str,
                               reference: Optional[discord.Message] = None,
                               code_language: Optional[str] = None):
    """
    Sends a message in chunks if it exceeds Discord's character limit.
    With code_language set, every chunk is wrapped in its own code block.
    """
    if code_language is None:
        chunks = chunk_lines(message)
    else:
        fence_open = f"```{code_language}\n"
        fence_close = "```"
        budget = MAX_MESSAGE_LENGTH - len(fence_open) - len(fence_close)
        chunks = [fence_open + chunk + fence_close for chunk in chunk_lines(message, budget)]

    # Send first chunk with reference
    if chunks:
        await channel.send(chunks[0], reference=reference)

    # Send remaining chunks
    for chunk in chunks[1:]:
        await channel.send(chunk)
