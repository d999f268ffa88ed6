"""Reshape raw Unipile (LinkedIn) responses into compact documents for the LLM.

Unlike the Apollo cleaners, these keep a *fixed* set of keys:

* keys are camelCase, mirroring what the chat UI already renders;
* a scalar or sub-object that is missing upstream comes back as ``None``;
* a collection that is missing upstream comes back as ``[]``.

List responses that lack ``items`` altogether collapse to the empty wrapper
(``{"posts": []}``, ``{"chats": []}``…).  Mutation responses (send, create,
follow) become ``{"success": True, "object": …, <id>}``, or ``None`` when the
API returned nothing.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any

# ── Helpers ──────────────────────────────────────────────────────────


def _items(response: Any) -> list[Mapping[str, Any]] | None:
    """Mapping entries of ``response["items"]``; ``None`` if there are none."""
    if not isinstance(response, Mapping):
        return None
    items = response.get("items")
    if not isinstance(items, list):
        return None
    return [item for item in items if isinstance(item, Mapping)]


def _list(value: Any) -> list[Any]:
    return list(value) if isinstance(value, list) else []


def _owned(value: Any) -> Any:
    """Deep copy of a raw sub-document; cleaned output never aliases the response."""
    return copy.deepcopy(value)


def _full_name(record: Mapping[str, Any]) -> str:
    return f"{record.get('first_name') or ''} {record.get('last_name') or ''}"


def _contact(person: Any) -> dict[str, Any] | None:
    """Sender/recipient summary attached to an invitation."""
    if not isinstance(person, Mapping):
        return None
    return {
        "firstName": person.get("first_name"),
        "lastName": person.get("last_name"),
        "fullName": _full_name(person),
        "headline": person.get("headline"),
        "profilePictureUrl": person.get("profile_picture_url"),
    }


def _acknowledge(response: Any, **ids: str) -> dict[str, Any] | None:
    """Build a mutation acknowledgement; ``ids`` maps output key -> source key."""
    if not isinstance(response, Mapping):
        return None
    ack: dict[str, Any] = {"success": True, "object": response.get("object")}
    for key, source in ids.items():
        ack[key] = response.get(source)
    return ack


# ── Users ────────────────────────────────────────────────────────────


def clean_user_profile(profile: Any) -> dict[str, Any] | None:
    if not isinstance(profile, Mapping):
        return None
    return {
        "firstName": profile.get("first_name"),
        "lastName": profile.get("last_name"),
        "fullName": _full_name(profile),
        "headline": profile.get("headline"),
        "location": _owned(profile.get("location")),
        "profilePictureUrl": (
            profile.get("profile_picture_url_large") or profile.get("profile_picture_url")
        ),
        "publicIdentifier": profile.get("public_identifier"),
        "providerId": profile.get("provider_id"),
        "memberUrn": profile.get("member_urn"),
        "followerCount": profile.get("follower_count"),
        "connectionsCount": profile.get("connections_count"),
        "isPremium": profile.get("is_premium"),
        "isInfluencer": profile.get("is_influencer"),
        "isCreator": profile.get("is_creator"),
    }


def clean_account_owner_profile(profile: Any) -> dict[str, Any] | None:
    """The connected account's own profile, plus its entity URN."""
    cleaned = clean_user_profile(profile)
    if cleaned is None:
        return None
    cleaned["entityUrn"] = profile.get("entity_urn")
    return cleaned


def clean_search_results(response: Any) -> dict[str, Any]:
    """People-category search hits."""
    items = _items(response)
    if items is None:
        return {"people": []}
    return {
        "people": [
            {
                "id": item.get("id"),
                "name": item.get("name"),
                "headline": item.get("headline"),
                "location": _owned(item.get("location")),
                "publicIdentifier": item.get("public_identifier"),
                "profileUrl": item.get("public_profile_url") or item.get("profile_url"),
                "profilePictureUrl": (
                    item.get("profile_picture_url_large") or item.get("profile_picture_url")
                ),
                "networkDistance": item.get("network_distance"),
            }
            for item in items
        ],
        "paging": _owned(response.get("paging")),
        "cursor": response.get("cursor"),
    }


def clean_user_relations(response: Any) -> dict[str, Any]:
    items = _items(response)
    if items is None:
        return {"connections": []}
    return {
        "connections": [
            {
                "firstName": item.get("first_name"),
                "lastName": item.get("last_name"),
                "fullName": _full_name(item),
                "headline": item.get("headline"),
                "profilePictureUrl": item.get("profile_picture_url"),
                "publicIdentifier": item.get("public_identifier"),
                "publicProfileUrl": item.get("public_profile_url"),
                "connectionDegree": item.get("connection_degree"),
                # identifiers needed by follow-up calls
                "memberId": item.get("member_id"),
                "memberUrn": item.get("member_urn"),
                "connectionUrn": item.get("connection_urn"),
                "createdAt": item.get("created_at"),
            }
            for item in items
        ],
    }


def _clean_invitations(response: Any, counterpart: str) -> dict[str, Any]:
    items = _items(response)
    if items is None:
        return {"invitations": []}
    return {
        "invitations": [
            {
                "id": item.get("id"),
                "sharedSecret": item.get("shared_secret"),
                "message": item.get("message"),
                "sentAt": item.get("sent_at"),
                counterpart: _contact(item.get(counterpart)),
            }
            for item in items
        ],
    }


def clean_invitations_received(response: Any) -> dict[str, Any]:
    return _clean_invitations(response, "sender")


def clean_invitations_sent(response: Any) -> dict[str, Any]:
    return _clean_invitations(response, "recipient")


def clean_send_invitation_response(response: Any) -> dict[str, Any] | None:
    return _acknowledge(response, invitationId="invitation_id")


# ── Posts & comments ─────────────────────────────────────────────────


def _post_author(author: Any) -> dict[str, Any] | None:
    if not isinstance(author, Mapping):
        return None
    return {
        "name": author.get("name"),
        "headline": author.get("headline"),
        "publicIdentifier": author.get("public_identifier"),
        "isCompany": author.get("is_company"),
    }


def _attachment(attachment: Mapping[str, Any]) -> dict[str, Any]:
    kind = attachment.get("type")
    cleaned: dict[str, Any] = {"type": kind, "url": attachment.get("url")}
    if kind == "file":
        cleaned["fileName"] = attachment.get("file_name")
        cleaned["mimeType"] = attachment.get("mimetype")
    elif kind in ("img", "video"):
        size = attachment.get("size")
        size = size if isinstance(size, Mapping) else {}
        cleaned["width"] = size.get("width")
        cleaned["height"] = size.get("height")
    return cleaned


def clean_post(post: Any) -> dict[str, Any] | None:
    """A single post, with its counters grouped under ``stats``."""
    if not isinstance(post, Mapping):
        return None
    return {
        "id": post.get("id"),
        "text": post.get("text"),
        "date": post.get("date"),
        "parsedDateTime": post.get("parsed_datetime"),
        "shareUrl": post.get("share_url"),
        "stats": {
            "comments": post.get("comment_counter"),
            "reactions": post.get("reaction_counter"),
            "reposts": post.get("repost_counter"),
            "impressions": post.get("impressions_counter"),
        },
        "author": _post_author(post.get("author")),
        "attachments": [
            _attachment(a) for a in _list(post.get("attachments")) if isinstance(a, Mapping)
        ],
        "isRepost": post.get("is_repost"),
    }


def clean_user_posts(response: Any) -> dict[str, Any]:
    items = _items(response)
    if items is None:
        return {"posts": []}
    return {"posts": [clean_post(item) for item in items]}


def _comment_author(comment: Mapping[str, Any]) -> dict[str, Any] | None:
    # Comments carry the author's display name as a plain string and the
    # rest of the author record under ``author_details``.
    author = comment.get("author")
    if isinstance(author, str):
        details = comment.get("author_details")
        details = details if isinstance(details, Mapping) else {}
        return {
            "name": author,
            "headline": details.get("headline"),
            "publicIdentifier": details.get("public_identifier"),
            "isCompany": details.get("is_company"),
        }
    return _post_author(author)


def clean_post_comments(response: Any) -> dict[str, Any]:
    items = _items(response)
    if items is None:
        return {"comments": []}
    return {
        "comments": [
            {
                "id": item.get("id"),
                "text": item.get("text"),
                "date": item.get("date"),
                "parsedDateTime": item.get("parsed_datetime"),
                "author": _comment_author(item),
                "stats": {"reactions": item.get("reaction_counter") or 0},
            }
            for item in items
        ],
    }


def clean_create_post_response(response: Any) -> dict[str, Any] | None:
    return _acknowledge(response, postId="post_id")


def clean_comment_on_post_response(response: Any) -> dict[str, Any] | None:
    return _acknowledge(response)


# ── Messaging ────────────────────────────────────────────────────────


def clean_message(message: Any) -> dict[str, Any] | None:
    if not isinstance(message, Mapping):
        return None
    return {
        "id": message.get("id"),
        "text": message.get("text"),
        "timestamp": message.get("timestamp"),
        "isSender": message.get("is_sender"),
        "senderId": message.get("sender_id"),
        "senderAttendeeId": message.get("sender_attendee_id"),
        "chatId": message.get("chat_id"),
        "chatProviderId": message.get("chat_provider_id"),
        "seen": message.get("seen"),
        "delivered": message.get("delivered"),
        "edited": message.get("edited"),
        "deleted": message.get("deleted"),
        "attachments": _owned(_list(message.get("attachments"))),
    }


def _attendee(attendee: Mapping[str, Any]) -> dict[str, Any]:
    return {
        "id": attendee.get("id"),
        "name": _full_name(attendee),
        "profilePictureUrl": attendee.get("profile_picture_url"),
    }


def _last_message(message: Any) -> dict[str, Any] | None:
    if not isinstance(message, Mapping):
        return None
    return {
        "text": message.get("text"),
        "timestamp": message.get("timestamp"),
        "senderId": message.get("sender_id"),
    }


def clean_chats(response: Any) -> dict[str, Any]:
    items = _items(response)
    if items is None:
        return {"chats": []}
    return {
        "chats": [
            {
                "id": chat.get("id"),
                "name": chat.get("name"),
                "lastActivity": chat.get("timestamp"),
                "unreadCount": chat.get("unread_count"),
                "attendeeProviderId": chat.get("attendee_provider_id"),
                "providerId": chat.get("provider_id"),
                "attendees": [
                    _attendee(a) for a in _list(chat.get("attendees")) if isinstance(a, Mapping)
                ],
                "lastMessage": _last_message(chat.get("last_message")),
            }
            for chat in items
        ],
    }


def clean_chat_messages(response: Any) -> dict[str, Any]:
    items = _items(response)
    if items is None:
        return {"messages": []}
    return {
        "messages": [clean_message(item) for item in items],
        "cursor": response.get("cursor"),
    }


def clean_create_chat_response(response: Any) -> dict[str, Any] | None:
    return _acknowledge(response, chatId="chat_id", messageId="message_id")


def clean_send_message_response(response: Any) -> dict[str, Any] | None:
    ack = _acknowledge(response)
    if ack is not None:
        ack["messageId"] = response.get("message_id") or response.get("id")
    return ack


# ── Companies ────────────────────────────────────────────────────────


def clean_company_profile(company: Any) -> dict[str, Any] | None:
    if not isinstance(company, Mapping):
        return None
    locations = [loc for loc in _list(company.get("locations")) if isinstance(loc, Mapping)]
    return {
        "id": company.get("id"),
        "entityUrn": company.get("entity_urn"),
        "name": company.get("name"),
        "description": company.get("description"),
        "publicIdentifier": company.get("public_identifier"),
        "industry": _owned(company.get("industry") or []),
        "website": company.get("website"),
        "employeeCount": company.get("employee_count"),
        "employeeCountRange": company.get("employee_count_range"),
        "foundedYear": company.get("founded_year"),
        "headquarters": _owned(
            next((loc for loc in locations if loc.get("is_headquarter")), None)
        ),
        "locations": [
            {
                "city": loc.get("city"),
                "country": loc.get("country"),
                "isHeadquarter": loc.get("is_headquarter"),
            }
            for loc in locations
        ],
        "hashtags": [
            tag.get("title") for tag in _list(company.get("hashtags")) if isinstance(tag, Mapping)
        ],
        "logoUrl": company.get("logo_large") or company.get("logo"),
        "profileUrl": company.get("profile_url"),
        "followersCount": company.get("follower_count"),
    }


def clean_company_search_results(response: Any) -> dict[str, Any]:
    items = _items(response)
    if items is None:
        return {"companies": []}
    return {
        "companies": [
            {
                "name": item.get("name"),
                "description": item.get("description") or item.get("summary"),
                "industry": _owned(item.get("industry") or []),
                "location": _owned(item.get("location")),
                "logoUrl": item.get("logo_large") or item.get("logo"),
                "profileUrl": item.get("profile_url"),
                "publicIdentifier": item.get("public_identifier"),
                "id": item.get("id"),
                "followersCount": item.get("followers_count"),
                "jobOffersCount": item.get("job_offers_count"),
            }
            for item in items
        ],
        "paging": _owned(response.get("paging")),
        "cursor": response.get("cursor"),
    }


def clean_follow_response(response: Any) -> dict[str, Any] | None:
    return _acknowledge(response)
