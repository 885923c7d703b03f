"""
Prompt builders for LLM-backed players.
"""

from typing import Dict, List

from ..core import Player, PlayerSecret, Turn, all_location_names


def format_transcript(turns: List[Turn], players: List[Player]) -> str:
    """Render the transcript with player names, oldest exchange first."""
    if not turns:
        return "(no questions asked yet)"
    names: Dict[str, str] = {p.id: p.name for p in players}
    lines = []
    for index, turn in enumerate(turns, start=1):
        asker = names.get(turn.asker_id, turn.asker_id)
        target = names.get(turn.target_id, turn.target_id)
        lines.append(f"{index}. {asker} asked {target}: {turn.question}\n   Answer: {turn.answer}")
    return "\n".join(lines)


def build_player_system_prompt(name: str, secret: PlayerSecret) -> str:
    locations = ", ".join(all_location_names())
    return "\n".join([
        "You are playing Spyfall in a group chat.",
        "",
        f"All possible locations in this game are: {locations}",
        "",
        "Rules:",
        "- If you are NOT the spy: you know the location. Answer questions naturally without being too obvious.",
        "- If you ARE the spy: you do not know the location. Infer it from others' answers.",
        "- Never explicitly reveal the location name.",
        "- Keep answers natural (1-3 sentences). Stay in character.",
        "- Prefer vague, indirect phrasing.",
        "",
        f"Your name is {name}.",
        secret.brief(),
    ])


def build_action_choice_prompt(players: List[Player], turns: List[Turn], self_player: Player, can_accuse: bool) -> str:
    options = ["- QUESTION: ask someone a question"]
    if self_player.is_spy:
        options.append("- GUESS: guess the location now. Right wins the game for you, wrong loses it")
    if can_accuse:
        options.append("- ACCUSE: accuse someone of being the spy and put it to a vote")
    return "\n".join([
        "It is your turn. Transcript so far:",
        format_transcript(turns, players),
        "",
        "Choose one action:",
        *options,
        "",
        "Reply exactly with:",
        "THOUGHT: <your private reasoning, one sentence>",
        "ACTION: <QUESTION, GUESS or ACCUSE>",
    ])


def build_asker_instruction(players: List[Player], self_player: Player) -> str:
    names = ", ".join(p.name for p in players if p.id != self_player.id)
    return "\n".join([
        f"Players you can ask: {names}",
        "Your job: ask ONE clever question to ONE player to gather info.",
        "Reply exactly with:",
        "THOUGHT: <why this question>",
        "TARGET: <player name>",
        "QUESTION: <your question>",
    ])


def build_answer_instruction(asker_name: str, question: str, secret: PlayerSecret) -> str:
    return "\n".join([
        f'{asker_name} asked you: "{question}"',
        secret.brief(),
        "Answer appropriately for Spyfall (1-3 sentences). Reply with the answer only.",
    ])


def build_spy_guess_prompt(turns: List[Turn], players: List[Player], when_caught: bool) -> str:
    if when_caught:
        opening = "You have been caught! This is your final chance to win. Based on the transcript, guess the location."
    else:
        opening = "You have decided to guess the location now. A wrong guess loses the game."
    return "\n".join([
        opening,
        f"Possible locations: {', '.join(all_location_names())}",
        "Reply exactly with:",
        "GUESS: <location name>",
        "REASON: <one sentence explaining what clue gave it away>",
        "",
        "Transcript:",
        format_transcript(turns, players),
    ])


def build_vote_prompt(players: List[Player], turns: List[Turn], self_player: Player) -> str:
    names = ", ".join(p.name for p in players if p.id != self_player.id)
    return "\n".join([
        "Review the transcript. Who is the SPY?",
        f"Candidates: {names}",
        "Reply exactly with:",
        "THOUGHT: <your private reasoning>",
        "VOTE: <player name>",
        "WHY: <one sentence reasoning>",
        "",
        "Transcript:",
        format_transcript(turns, players),
    ])


def build_accusation_prompt(players: List[Player], turns: List[Turn], self_player: Player) -> str:
    names = ", ".join(p.name for p in players if p.id != self_player.id)
    return "\n".join([
        "You are accusing someone of being the spy. Everyone will vote on it.",
        f"Candidates: {names}",
        "Reply exactly with:",
        "THOUGHT: <your private reasoning>",
        "TARGET: <player name>",
        "REASON: <public statement explaining the accusation>",
        "",
        "Transcript:",
        format_transcript(turns, players),
    ])


def build_defense_prompt(accuser_name: str, accusation: str, turns: List[Turn], players: List[Player]) -> str:
    return "\n".join([
        f"{accuser_name} accuses you of being the spy!",
        f'Their reason: "{accusation}"',
        "Defend yourself publicly.",
        "Reply exactly with:",
        "THOUGHT: <your private strategy>",
        "DEFENSE: <your public defense>",
        "",
        "Transcript:",
        format_transcript(turns, players),
    ])


def build_accusation_vote_prompt(accuser_name: str, accused_name: str, defense: str,
                                 turns: List[Turn], players: List[Player]) -> str:
    return "\n".join([
        f"{accuser_name} accuses {accused_name} of being the spy.",
        f'{accused_name}\'s defense: "{defense}"',
        "Do you agree the accused is the spy?",
        "Reply exactly with:",
        "VOTE: <YES or NO>",
        "REASON: <one public sentence>",
        "",
        "Transcript:",
        format_transcript(turns, players),
    ])


def build_reaction_prompt(event_type: str, author_name: str, content: str) -> str:
    return "\n".join([
        f'{author_name} just gave this {event_type}: "{content}"',
        "React briefly, in character.",
        "Reply exactly with:",
        "EMOJI: <one emoji>",
        "REACTION: <a few words, said out loud>",
        "SUSPICION: <private note on how suspicious this was, or empty>",
    ])
