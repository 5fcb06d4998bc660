"""
User Administration ViewSet.
"""
from django.db import models, transaction
from django.db.models import ProtectedError
from rest_framework import viewsets, status, permissions
from rest_framework.decorators import action
from rest_framework.response import Response
from apps.authz.models import User, UserAuditLog, UserAuditActionChoices
from apps.authz.serializers import AccountSummarySerializer, ProfileUpdateSerializer
from apps.authz.serializers_users import (
    UserListSerializer,
    UserDetailSerializer,
    UserCreateSerializer,
    UserUpdateSerializer,
    PasswordChangeSerializer,
    ensure_other_active_admin,
    generate_temporary_password,
)
from apps.authz.permissions import IsAdmin
from apps.core.observability.events import log_account_event, log_domain_event

AUDITED_FIELDS = ['email', 'name', 'role', 'is_active', 'phone', 'license_number', 'specialty']


def get_client_ip(request):
    """Extract client IP address from request."""
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        return x_forwarded_for.split(',')[0]
    return request.META.get('REMOTE_ADDR')


def audit(request, target, action, **metadata):
    metadata['ip_address'] = get_client_ip(request)
    UserAuditLog.objects.create(
        actor_user=request.user,
        target_user=target,
        action=action,
        metadata=metadata,
    )
    log_account_event(f'user_{action}', target, actor=request.user)


class UserAdminViewSet(viewsets.ModelViewSet):
    """
    ViewSet for User Administration endpoints.

    Endpoints:
    - GET /api/v1/users/ - List users with search
    - GET /api/v1/users/{id}/ - Get user detail
    - POST /api/v1/users/ - Create user
    - PATCH /api/v1/users/{id}/ - Update user
    - DELETE /api/v1/users/{id}/ - Hard delete (refused while referenced)
    - POST /api/v1/users/{id}/activate/ - Re-enable account
    - POST /api/v1/users/{id}/deactivate/ - Disable account
    - POST /api/v1/users/{id}/reset-password/ - Reset user password
    - GET/PATCH /api/v1/users/me/ - Own profile (any role)
    - POST /api/v1/users/change-password/ - Change own password (any role)

    Query parameters for list:
    - ?q=search_term - Search by email, name
    - ?is_active=true|false - Filter by active status
    - ?role=admin|billing|scheduling|clinician|patient - Filter by role

    RBAC:
    - Admin: Full access to all endpoints
    - Others: only me/ and change-password/
    """
    permission_classes = [IsAdmin]
    http_method_names = ['get', 'post', 'patch', 'delete', 'head', 'options']

    def get_queryset(self):
        """Get all users with filters."""
        queryset = User.objects.all()

        q = self.request.query_params.get('q')
        if q:
            queryset = queryset.filter(
                models.Q(email__icontains=q) |
                models.Q(name__icontains=q)
            )

        is_active = self.request.query_params.get('is_active')
        if is_active is not None:
            queryset = queryset.filter(is_active=is_active.lower() == 'true')

        role = self.request.query_params.get('role')
        if role:
            queryset = queryset.filter(role=role)

        return queryset.order_by('-created_at')

    def get_serializer_class(self):
        """Use different serializers for different actions."""
        if self.action == 'list':
            return UserListSerializer
        elif self.action == 'create':
            return UserCreateSerializer
        elif self.action in ['update', 'partial_update']:
            return UserUpdateSerializer
        elif self.action == 'change_password':
            return PasswordChangeSerializer
        elif self.action == 'me':
            return ProfileUpdateSerializer
        return UserDetailSerializer

    @transaction.atomic
    def create(self, request, *args, **kwargs):
        """Create new user with audit log."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()

        audit(
            request, user, UserAuditActionChoices.CREATE_USER,
            created_fields=[key for key in serializer.validated_data if key != 'password'],
            role=user.role,
        )

        response_data = UserDetailSerializer(user).data
        response_data['temporary_password'] = getattr(user, '_temporary_password', None)
        return Response(response_data, status=status.HTTP_201_CREATED)

    @transaction.atomic
    def update(self, request, *args, **kwargs):
        """Update user with audit log."""
        partial = kwargs.pop('partial', False)
        instance = self.get_object()

        before_state = {field: str(getattr(instance, field)) for field in AUDITED_FIELDS}

        serializer = self.get_serializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()

        after_state = {field: str(getattr(user, field)) for field in AUDITED_FIELDS}

        changed_fields = {
            key: {'before': before_state[key], 'after': after_state[key]}
            for key in AUDITED_FIELDS
            if before_state[key] != after_state[key]
        }

        if 'is_active' in changed_fields:
            action_name = (
                UserAuditActionChoices.ACTIVATE_USER if user.is_active
                else UserAuditActionChoices.DEACTIVATE_USER
            )
        else:
            action_name = UserAuditActionChoices.UPDATE_USER

        audit(request, user, action_name, changed_fields=changed_fields)

        return Response(UserDetailSerializer(user).data)

    def destroy(self, request, *args, **kwargs):
        """
        Hard delete. Irreversible.

        Refused with 409 while appointments or medical records reference
        the account; deactivate it instead.
        """
        user = self.get_object()
        if user.id == request.user.id:
            return Response(
                {'error': 'You cannot delete your own account.'},
                status=status.HTTP_400_BAD_REQUEST
            )
        ensure_other_active_admin(user)

        user_id, email = str(user.id), user.email
        try:
            with transaction.atomic():
                UserAuditLog.objects.create(
                    actor_user=request.user,
                    target_user=user,
                    action=UserAuditActionChoices.DELETE_USER,
                    metadata={'deleted_user_id': user_id, 'deleted_email': email,
                              'ip_address': get_client_ip(request)},
                )
                user.delete()
        except ProtectedError:
            log_account_event('user_delete_user', user, actor=request.user, result='blocked')
            return Response(
                {'error': 'This account still has appointments or medical records. Deactivate it instead.'},
                status=status.HTTP_409_CONFLICT
            )

        log_domain_event(
            'user_delete_user',
            entity_type='User',
            entity_id=user_id,
            entity_ids={'actor_user_id': str(request.user.id)},
        )
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['post'])
    @transaction.atomic
    def activate(self, request, pk=None):
        user = self.get_object()
        if not user.is_active:
            user.is_active = True
            user.save(update_fields=['is_active', 'updated_at'])
            audit(request, user, UserAuditActionChoices.ACTIVATE_USER)
        return Response(UserDetailSerializer(user).data)

    @action(detail=True, methods=['post'])
    @transaction.atomic
    def deactivate(self, request, pk=None):
        user = self.get_object()
        if user.id == request.user.id:
            return Response(
                {'error': 'You cannot deactivate your own account.'},
                status=status.HTTP_400_BAD_REQUEST
            )
        if user.is_active:
            ensure_other_active_admin(user)
            user.is_active = False
            user.save(update_fields=['is_active', 'updated_at'])
            audit(request, user, UserAuditActionChoices.DEACTIVATE_USER)
        return Response(UserDetailSerializer(user).data)

    @action(detail=True, methods=['post'], url_path='reset-password')
    @transaction.atomic
    def reset_password(self, request, pk=None):
        """
        Admin resets user password.

        Returns the temporary password (shown once).
        """
        user = self.get_object()
        temp_password = generate_temporary_password()
        user.set_password(temp_password)
        user.save(update_fields=['password'])

        audit(request, user, UserAuditActionChoices.RESET_PASSWORD)

        return Response({
            'message': 'Password reset successfully',
            'user_id': str(user.id),
            'email': user.email,
            'temporary_password': temp_password,
        })

    @action(detail=False, methods=['get', 'patch'], permission_classes=[permissions.IsAuthenticated])
    def me(self, request):
        """Own profile. Role and active flag are read-only here."""
        if request.method == 'GET':
            return Response(AccountSummarySerializer(request.user).data)

        serializer = ProfileUpdateSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        log_account_event('profile_updated', user, actor=user, fields=sorted(serializer.validated_data))
        return Response(AccountSummarySerializer(user).data)

    @action(detail=False, methods=['post'], url_path='change-password', permission_classes=[permissions.IsAuthenticated])
    @transaction.atomic
    def change_password(self, request):
        """
        User changes their own password.

        Requires old_password for verification.
        """
        serializer = PasswordChangeSerializer(data=request.data, context={'user': request.user})
        serializer.is_valid(raise_exception=True)
        user = serializer.save()

        audit(request, user, UserAuditActionChoices.CHANGE_PASSWORD, self_change=True)

        return Response({'message': 'Password changed successfully'})
