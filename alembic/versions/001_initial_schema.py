"""Initial schema: users, books, libraries, memberships, recommendations, ratings

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-18

"""
import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = '001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None

CRITERIA_COLUMNS = ('style', 'content', 'enjoyment', 'originality', 'edition')


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('username', sa.String(50), primary_key=True),
        sa.Column('password', sa.String(255), nullable=False),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('national_id', sa.String(16), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_users_national_id', 'users', ['national_id'], unique=True)
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'books',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(500), nullable=False),
        sa.Column('authors', sa.String(500), nullable=False),
        sa.Column('publication_year', sa.Integer(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('categories', sa.String(255), nullable=True),
        sa.Column('publisher', sa.String(255), nullable=True),
        sa.Column('price', sa.String(50), nullable=True),
    )
    op.create_index('ix_books_title', 'books', ['title'])
    op.create_index('ix_books_authors', 'books', ['authors'])
    op.create_index('ix_books_publication_year', 'books', ['publication_year'])

    op.create_table(
        'libraries',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column(
            'user_id',
            sa.String(50),
            sa.ForeignKey('users.username', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('user_id', 'name', name='uq_library_user_name'),
    )
    op.create_index('ix_libraries_user_id', 'libraries', ['user_id'])

    op.create_table(
        'library_books',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column(
            'library_id',
            sa.Integer(),
            sa.ForeignKey('libraries.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('book_id', sa.Integer(), sa.ForeignKey('books.id'), nullable=False),
        sa.Column('inserted_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('library_id', 'book_id', name='uq_library_book'),
    )
    op.create_index('ix_library_books_library_id', 'library_books', ['library_id'])
    op.create_index('ix_library_books_book_id', 'library_books', ['book_id'])

    op.create_table(
        'recommendations',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column(
            'user_id',
            sa.String(50),
            sa.ForeignKey('users.username', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column(
            'library_id',
            sa.Integer(),
            sa.ForeignKey('libraries.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('read_book_id', sa.Integer(), sa.ForeignKey('books.id'), nullable=False),
        sa.Column('recommended_book_id', sa.Integer(), sa.ForeignKey('books.id'), nullable=False),
        sa.Column('comment', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint(
            'user_id', 'library_id', 'read_book_id', 'recommended_book_id',
            name='uq_recommendation_key',
        ),
        sa.CheckConstraint('read_book_id <> recommended_book_id', name='ck_recommendation_not_self'),
    )
    for column in ('user_id', 'library_id', 'read_book_id', 'recommended_book_id'):
        op.create_index(f'ix_recommendations_{column}', 'recommendations', [column])

    op.create_table(
        'ratings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column(
            'user_id',
            sa.String(50),
            sa.ForeignKey('users.username', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('book_id', sa.Integer(), sa.ForeignKey('books.id'), nullable=False),
        sa.Column(
            'library_id',
            sa.Integer(),
            sa.ForeignKey('libraries.id', ondelete='SET NULL'),
            nullable=True,
        ),
        *(sa.Column(column, sa.Integer(), nullable=False) for column in CRITERIA_COLUMNS),
        *(sa.Column(f'{column}_note', sa.Text(), nullable=True) for column in CRITERIA_COLUMNS),
        sa.Column('overall', sa.Float(), nullable=False),
        sa.Column('final_comment', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('user_id', 'book_id', name='uq_rating_user_book'),
        *(
            sa.CheckConstraint(f'{column} BETWEEN 1 AND 5', name=f'ck_rating_{column}_range')
            for column in CRITERIA_COLUMNS
        ),
    )
    for column in ('user_id', 'book_id', 'library_id'):
        op.create_index(f'ix_ratings_{column}', 'ratings', [column])


def downgrade() -> None:
    op.drop_table('ratings')
    op.drop_table('recommendations')
    op.drop_table('library_books')
    op.drop_table('libraries')
    op.drop_table('books')
    op.drop_table('users')
