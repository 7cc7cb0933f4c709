"""
GraphQL mutation documents
"""
from postboard.graphql.queries import POST_FIELDS

CREATE_POST = """
mutation CreatePost($input: CreatePostInput!, $condition: ModelPostConditionInput) {
  createPost(input: $input, condition: $condition) {%s}
}
""" % POST_FIELDS

UPDATE_POST = """
mutation UpdatePost($input: UpdatePostInput!, $condition: ModelPostConditionInput) {
  updatePost(input: $input, condition: $condition) {%s}
}
""" % POST_FIELDS
