"""
Post service contract and the hosted GraphQL implementation
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Set

from postboard.core.graphql_client import AuthMode, GraphQLClient, require_field
from postboard.core.logging_config import LoggingConfig
from postboard.graphql.mutations import CREATE_POST, UPDATE_POST
from postboard.graphql.queries import LIST_POSTS
from postboard.models.post import CreatePostInput, Post, UpdatePostInput

logger = LoggingConfig.get_logger(__name__)


class PostService(ABC):
    """
    Queryable, mutable post store with server-side owner authorization.

    ``list_posts`` must work without a session. Writes take the caller's access token;
    the service decides who the caller is and records ``owner`` itself.
    """

    @abstractmethod
    async def list_posts(self) -> List[Post]:
        """Return the full post collection"""

    @abstractmethod
    async def create_post(self, data: CreatePostInput, access_token: Optional[str]) -> Post:
        """Create a post owned by the caller"""

    @abstractmethod
    async def update_post(self, data: UpdatePostInput, access_token: Optional[str]) -> Post:
        """Change the title of a post the caller owns"""

    async def health_check(self) -> bool:
        return True

    async def close(self):
        pass


class GraphQLPostService(PostService):
    """PostService backed by the hosted GraphQL API"""

    def __init__(self, client: GraphQLClient, page_size: int = 100):
        self.client = client
        self.page_size = page_size

    @staticmethod
    def _parse_items(items: List[Optional[Dict[str, Any]]]) -> List[Post]:
        # the service nulls out items the caller may not read
        return [Post.model_validate(item) for item in items if item is not None]

    async def list_posts(self) -> List[Post]:
        """Fetch every page of listPosts with public read access"""
        posts: List[Post] = []
        next_token: Optional[str] = None
        seen_tokens: Set[str] = set()
        pages = 0

        while True:
            variables: Dict[str, Any] = {"limit": self.page_size}
            if next_token:
                variables["nextToken"] = next_token

            data = await self.client.execute(LIST_POSTS, variables, auth_mode=AuthMode.API_KEY)
            connection = data.get("listPosts") or {}
            posts.extend(self._parse_items(connection.get("items") or []))
            pages += 1

            next_token = connection.get("nextToken")
            if not next_token:
                break
            if next_token in seen_tokens:
                logger.error(
                    "listPosts returned a nextToken it already returned, stopping pagination",
                    extra={"pages": pages, "count": len(posts)},
                )
                break
            seen_tokens.add(next_token)

        logger.debug("Listed posts", extra={"count": len(posts), "pages": pages})
        return posts

    async def create_post(self, data: CreatePostInput, access_token: Optional[str]) -> Post:
        result = await self.client.execute(
            CREATE_POST,
            data.to_variables(),
            auth_mode=AuthMode.USER_POOL,
            access_token=access_token,
        )
        post = Post.model_validate(require_field(result, "createPost", "createPost"))
        logger.info("Post created", extra={"post_id": post.id, "owner": post.owner})
        return post

    async def update_post(self, data: UpdatePostInput, access_token: Optional[str]) -> Post:
        result = await self.client.execute(
            UPDATE_POST,
            data.to_variables(),
            auth_mode=AuthMode.USER_POOL,
            access_token=access_token,
        )
        post = Post.model_validate(require_field(result, "updatePost", "updatePost"))
        logger.info("Post updated", extra={"post_id": post.id})
        return post

    async def health_check(self) -> bool:
        return await self.client.health_check()

    async def close(self):
        await self.client.close()
