"""
GraphQL query documents
"""

POST_FIELDS = """
    id
    title
    content
    owner
    createdAt
    updatedAt
"""

LIST_POSTS = """
query ListPosts($filter: ModelPostFilterInput, $limit: Int, $nextToken: String) {
  listPosts(filter: $filter, limit: $limit, nextToken: $nextToken) {
    items {%s}
    nextToken
  }
}
""" % POST_FIELDS
