from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from utils.rate_limiter import get_message_rate_limiter

from .inbox import InboxAggregator
from .polling import get_polling_intervals, with_poll_interval
from .serializers import (
    ConversationCreateSerializer,
    ConversationMessageSerializer,
    ConversationSerializer,
    EnrichedConversationSerializer,
    MessageCreateSerializer,
)
from .services import ConversationService, MessageService, require_caller

TRUE_VALUES = ('1', 'true', 'yes')


class ConversationListCreateView(APIView):
    """
    GET  /conversations/                  inbox for the caller
    GET  /conversations/?unread_only=true unread badge count (also ?unreadOnly=true)
    POST /conversations/                  create or get the caller's conversation about a listing
    """

    def get(self, request):
        user_id = require_caller(getattr(request, 'user_id', None))

        unread_only = request.query_params.get('unreadOnly') or request.query_params.get('unread_only', '')
        if unread_only.lower() in TRUE_VALUES:
            unread_count = MessageService().unread_count_for_user(user_id)
            return Response({'unread_count': unread_count})

        intervals = get_polling_intervals()
        inbox = InboxAggregator().list_enriched_conversations(user_id)
        response = Response({
            'conversations': EnrichedConversationSerializer(inbox, many=True).data,
            'total_count': len(inbox),
            'poll_interval_ms': intervals.inbox_ms,
        })
        return with_poll_interval(response, intervals.inbox_ms)

    def post(self, request):
        user_id = require_caller(getattr(request, 'user_id', None))

        serializer = ConversationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        conversation, created = ConversationService().create_or_get_conversation(
            serializer.validated_data.get('listing_id'),
            user_id,
        )
        return Response(
            ConversationSerializer(conversation).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )


class ConversationMessagesView(APIView):
    """
    GET  /conversations/<id>/messages/  thread, oldest first; marks the counterpart's messages read
    POST /conversations/<id>/messages/  send a message
    """

    def get(self, request, conversation_id):
        user_id = require_caller(getattr(request, 'user_id', None))

        intervals = get_polling_intervals()
        messages = MessageService().open_conversation(conversation_id, user_id)
        response = Response({
            'conversation_id': conversation_id,
            'messages': ConversationMessageSerializer(messages, many=True).data,
            'poll_interval_ms': intervals.messages_ms,
        })
        return with_poll_interval(response, intervals.messages_ms)

    def post(self, request, conversation_id):
        user_id = require_caller(getattr(request, 'user_id', None))

        serializer = MessageCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        service = MessageService(rate_limiter=get_message_rate_limiter())
        message = service.append_message(conversation_id, user_id, serializer.validated_data.get('text'))
        return Response(ConversationMessageSerializer(message).data, status=status.HTTP_201_CREATED)
