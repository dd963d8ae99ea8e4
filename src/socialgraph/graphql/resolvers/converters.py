"""
Conversion from store records to GraphQL types
"""

from collections.abc import Callable, Iterable
from typing import Any

from ...store.base import MemberTypeRecord, PostRecord, ProfileRecord, UserRecord
from ..types.member_type import MemberType, MemberTypeId
from ..types.post import Post
from ..types.profile import Profile
from ..types.user import SubscriptionLinks, User, UserPrefetch


def to_member_type(record: MemberTypeRecord) -> MemberType:
    return MemberType(
        id=MemberTypeId(record.id),
        discount=record.discount,
        posts_limit_per_month=record.posts_limit_per_month,
    )


def to_post(record: PostRecord) -> Post:
    return Post(
        id=record.id,
        title=record.title,
        content=record.content,
        author_id=record.author_id,
    )


def to_profile(record: ProfileRecord, member_type: MemberType | None = None) -> Profile:
    return Profile(
        id=record.id,
        is_male=record.is_male,
        year_of_birth=record.year_of_birth,
        user_id=record.user_id,
        member_type_id=MemberTypeId(record.member_type_id),
        prefetched_member_type=member_type,
    )


def to_user(
    record: UserRecord,
    links: SubscriptionLinks | None = None,
    prefetch: UserPrefetch | None = None,
) -> User:
    return User(
        id=record.id,
        name=record.name,
        balance=record.balance,
        links=links,
        prefetch=prefetch,
    )


CONVERTERS: dict[str, Callable[[Any], Any]] = {
    "MemberType": to_member_type,
    "Post": to_post,
    "Profile": to_profile,
    "User": to_user,
}


def convert_all(type_name: str, records: Iterable[Any]) -> list[Any]:
    convert = CONVERTERS[type_name]
    return [convert(record) for record in records]
