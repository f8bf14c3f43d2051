from deepshortener.dao.dynamodb.link_dynamodb_dao import LinkDynamoDBDAO


__all__ = [
    'LinkDynamoDBDAO',
]
