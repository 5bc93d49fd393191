"""Insert two sample blog posts (one published, one draft). Run: python -m scripts.seed_blog_posts"""
from app.db.session import SessionLocal
from app.schemas.catalog import BlogPostIn
from app.services.catalog_service import create_blog_post

SAMPLE_POSTS = [
    BlogPostIn(
        title="Welcome to the Oromia Education Center Blog",
        content="This is the first post on our new blog! Here we will share news, updates, and stories from the "
                "Oromia Education Research and Training Center. Stay tuned for more content.",
        excerpt="An introduction to our new blog. Stay tuned for news and updates.",
        imageUrl="https://placehold.co/800x400.png",
        isPublished=True,
    ),
    BlogPostIn(
        title="Upcoming Facility Enhancements (Draft)",
        content="We are excited to announce several upcoming enhancements to our facilities. "
                "This is a draft post and should not be visible to the public.",
        excerpt="A sneak peek at the exciting new changes coming soon.",
        imageUrl="https://placehold.co/800x400.png",
        isPublished=False,
    ),
]


def main():
    db = SessionLocal()
    try:
        print("[seed_blog_posts] seeding blog posts")
        for body in SAMPLE_POSTS:
            post = create_blog_post(db, body, author_name="Admin Team")
            print(f"[seed_blog_posts] added '{post.title}' ({post.slug})")
        print("[seed_blog_posts] done")
    finally:
        db.close()


if __name__ == "__main__":
    main()
